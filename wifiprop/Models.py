from collections import OrderedDict, namedtuple

from aenum import Enum


class PropagationModel(Enum):
    _init_ = 'value fullname type_id'

    FRIIS = 0, "Friis", "ns3::FriisPropagationLossModel"
    FIXED_RSS = 1, "FixedRSS", "ns3::FixedRssLossModel"
    THREE_LOG_DISTANCE = 2, "ThreeLogDistance", "ns3::ThreeLogDistancePropagationLossModel"
    TWO_RAY_GROUND = 3, "TwoRayGround", "ns3::TwoRayGroundPropagationLossModel"
    NAKAGAMI = 4, "Nakagami", "ns3::NakagamiPropagationLossModel"

    def __str__(self):
        return self.fullname

    @classmethod
    def from_name(cls, name):
        for model in cls:
            if model.fullname == name:
                return model
        raise ValueError(f"Propagation model {name} is unknown")


# ns-3 attribute names each loss model is configured with, in the order they are passed on
REQUIRED_PARAMETERS = {
    PropagationModel.FRIIS: ("Frequency", "SystemLoss"),
    PropagationModel.FIXED_RSS: ("Rss",),
    PropagationModel.THREE_LOG_DISTANCE: ("Distance0", "Distance1", "Distance2", "ReferenceLoss"),
    PropagationModel.TWO_RAY_GROUND: ("Frequency", "MinDistance", "SystemLoss", "HeightAboveZ"),
    PropagationModel.NAKAGAMI: ("Distance1", "Distance2", "m0", "m1", "m2"),
}


LossModelConfig = namedtuple("LossModelConfig", ["model", "type_id", "attributes"])


def propagation_model_to_string(model: PropagationModel):
    return model.fullname


def configured_models(settings):
    return [PropagationModel.from_name(name) for name in settings.PROPAGATION_MODELS]


def loss_model_config(model: PropagationModel, settings):
    parameters = settings.PROPAGATION_MODEL_PARAMETERS[model.fullname]
    if parameters is None:
        parameters = {}

    missing = [name for name in REQUIRED_PARAMETERS[model] if name not in parameters]
    if missing:
        raise ValueError(f"Propagation model {model.fullname} is missing parameters: {', '.join(missing)}")

    attributes = OrderedDict((name, float(parameters[name])) for name in REQUIRED_PARAMETERS[model])
    return LossModelConfig(model, model.type_id, attributes)


def is_capped(model: PropagationModel, settings):
    return model.fullname in (settings.CAPPED_MODELS or [])

import os

from wifiprop.config import settings
from wifiprop.Models import configured_models
from wifiprop.utils import load_results, summarize

df = load_results(settings.OUTPUT_DIRECTORY, configured_models(settings))

if len(df) == 0:
    print(f"No results found in {os.path.abspath(settings.OUTPUT_DIRECTORY)}")
else:
    print(summarize(df))

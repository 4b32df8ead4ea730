"""Root conftest: runs before any test module imports."""

import os

# A developer shell may export REFLECT_* overrides (model, timeout,
# storage directory). Clear them so config tests see only what they set.
for _var in [v for v in os.environ if v.startswith("REFLECT_")]:
    os.environ.pop(_var, None)

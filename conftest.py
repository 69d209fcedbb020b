# Root conftest.py - loaded by pytest before test collection.
# Load .env first so DERIVED_OBJECTS_* overrides apply to every test session.
from dotenv import load_dotenv
load_dotenv()

# Note: Fixtures from tests/conftest.py are automatically discovered by pytest
# since tests/ is a subdirectory.

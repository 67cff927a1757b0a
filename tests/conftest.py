import pytest
import crosspreview


@pytest.fixture(scope="session")
def structural():
    """Structural backend shared across tests, it keeps no state."""
    return crosspreview.select_backend(crosspreview.PreviewConfig(backend="structural"))


@pytest.fixture(scope="session")
def fallback():
    """Text scanning backend."""
    return crosspreview.FallbackBackend()

"""Tests for the ragfolio package structure."""


def test_package_imports():
    """Test that main package can be imported."""
    import ragfolio
    assert ragfolio.__version__ == "0.1.0"


def test_service_subpackage():
    """Test that service subpackage exists."""
    import ragfolio.service
    assert ragfolio.service is not None


def test_client_subpackage():
    """Test that client subpackage exists."""
    import ragfolio.client
    assert ragfolio.client is not None


def test_vector_store_subpackage():
    """Test that vector store backends are exported."""
    from ragfolio.service.vector_store import InMemoryVectorStore, get_vector_store
    assert InMemoryVectorStore is not None
    assert callable(get_vector_store)

from scribe.core.model_lifecycle.orchestrator import ModelOrchestrator
from scribe.core.model_lifecycle.types import ModelType

def test_orchestrator_is_a_singleton():
    assert ModelOrchestrator() is ModelOrchestrator()

def test_one_model_resident_at_a_time():
    """
    Same (type, variant) reuses the loaded model; a new variant evicts it.
    """
    orchestrator = ModelOrchestrator()
    loads = []

    def loader(name):
        def load():
            loads.append(name)
            return {"model": name}
        return load

    first = orchestrator.request_model(ModelType.WHISPER, "test-tiny", loader("test-tiny"))
    again = orchestrator.request_model(ModelType.WHISPER, "test-tiny", loader("test-tiny"))
    assert first is again
    assert loads == ["test-tiny"]

    other = orchestrator.request_model(ModelType.WHISPER, "test-base", loader("test-base"))
    assert other == {"model": "test-base"}
    assert loads == ["test-tiny", "test-base"]
    assert orchestrator.get_current_model() == (ModelType.WHISPER, "test-base")

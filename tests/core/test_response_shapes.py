import pytest
from scribe.core.common.response_shapes import extract_output_url
from scribe.core.errors import ResponseShapeError

def test_plain_string_and_array_shapes():
    assert extract_output_url("https://cdn.example/a.png") == "https://cdn.example/a.png"
    assert extract_output_url(["https://cdn.example/1.png", "https://cdn.example/2.png"]) == "https://cdn.example/1.png"

def test_object_keys_in_priority_order():
    payload = {"prediction": "p", "url": "u", "output": "o"}
    assert extract_output_url(payload) == "o"

    assert extract_output_url({"image": "i", "result": "r"}) == "i"
    assert extract_output_url({"result": ["r1", "r2"]}) == "r1"
    assert extract_output_url({"prediction": {"url": "nested"}}) == "nested"

def test_empty_values_fall_through_to_next_key():
    assert extract_output_url({"output": "", "url": "u"}) == "u"
    assert extract_output_url({"output": [], "image": "i"}) == "i"

@pytest.mark.parametrize("payload", [None, 42, [], {}, {"status": "succeeded"}, [{"id": 1}], "   "])
def test_unknown_shapes_raise(payload):
    with pytest.raises(ResponseShapeError):
        extract_output_url(payload)

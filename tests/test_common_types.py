from gptlink.common_types import FunctionCall, Message, OpenAIAuth


def test_auth_empty_by_default():
    assert OpenAIAuth().is_empty() is True


def test_auth_empty_when_one_part_missing():
    assert OpenAIAuth(api_key="placeholder").is_empty() is True
    assert OpenAIAuth(organization_id="org-id").is_empty() is True


def test_auth_not_empty_when_complete():
    auth = OpenAIAuth(api_key="placeholder", organization_id="org-id")
    assert auth.is_empty() is False


def test_message_to_dict_minimal():
    message = Message(role="user", content="hello!")
    assert message.to_dict() == {"role": "user", "content": "hello!"}


def test_message_to_dict_with_name():
    message = Message(role="function", content="result", name="get_current_weather")
    data = message.to_dict()
    assert data["name"] == "get_current_weather"
    assert "function_call" not in data


def test_message_to_dict_with_function_call():
    call = FunctionCall(arguments='{"location": "Boston"}', name="get_current_weather")
    message = Message(role="assistant", function_call=call)
    data = message.to_dict()
    assert data["function_call"] == {
        "name": "get_current_weather",
        "arguments": '{"location": "Boston"}',
    }
    assert "name" not in data


def test_message_defaults_are_independent():
    first = Message()
    second = Message()
    first.function_call.name = "changed"
    assert second.function_call.name == ""
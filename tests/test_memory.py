from form_agent.memory import ConversationMemory
from form_agent.models import ObjectiveData
from form_agent.prompts import INVALID_RESPONSE_PROMPT


def objective():
    return ObjectiveData(firstName="Ann", lastName="Lee", gender="Female")


def test_starts_with_single_system_message():
    memory = ConversationMemory(objective())

    assert len(memory) == 1
    system = memory.history[0]
    assert system["role"] == "system"
    assert '{"firstName": "Ann", "lastName": "Lee", "gender": "Female"}' in system["content"]
    assert "dateOfBirth" not in system["content"]
    assert '{"action": "finish"}' in system["content"]
    assert "click the 'Submit' button" in system["content"]


def test_step_messages_alternate_user_and_assistant():
    memory = ConversationMemory(objective())

    for i in range(3):
        memory.add_perception(f"<h2>step {i}</h2>")
        memory.add_reply('{"action": "finish"}')

    assert len(memory) == 1 + 2 * 3
    assert [m["role"] for m in memory.history[1:]] == ["user", "assistant"] * 3
    assert "Reminder: Your goal is to fill out this medical form" in memory.history[1]["content"]
    assert "<h2>step 0</h2>" in memory.history[1]["content"]


def test_correction_keeps_invalid_reply():
    memory = ConversationMemory(objective())
    memory.add_perception("<h2></h2>")
    memory.add_reply("no json here")
    memory.add_correction()

    assert [m["role"] for m in memory.history] == ["system", "user", "assistant", "user"]
    assert memory.history[2]["content"] == "no json here"
    assert memory.history[3]["content"] == INVALID_RESPONSE_PROMPT


def test_messages_replay_full_history_by_default():
    memory = ConversationMemory(objective())
    for i in range(30):
        memory.add_perception(str(i))
        memory.add_reply(str(i))

    assert memory.messages() == memory.history
    assert memory.messages() is not memory.history


def test_window_keeps_system_and_last_messages():
    memory = ConversationMemory(objective(), window=4)
    for i in range(5):
        memory.add_perception(f"page {i}")
        memory.add_reply(f"reply {i}")

    messages = memory.messages()

    assert len(messages) == 5
    assert messages[0]["role"] == "system"
    assert messages[-1]["content"] == "reply 4"
    assert len(memory.history) == 11


def test_custom_submit_button_name_in_prompts():
    memory = ConversationMemory(objective(), submit_button_name="Send")
    memory.add_premature_finish_correction()

    assert "click the 'Send' button" in memory.history[0]["content"]
    assert "'Send' button has not been clicked" in memory.history[1]["content"]

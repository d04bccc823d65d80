import pytest

from malt.repl import LineReader

# Tests must not pick up a developer's MALT_* settings; each test starts from
# the defaults and sets what it needs through monkeypatch.


@pytest.fixture(autouse=True)
def _clean_malt_env(monkeypatch):
    for var in ("MALT_PROMPT", "MALT_HISTORY_FILE", "MALT_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def scripted_reader():
    """Build a LineReader fed from a list of lines, or exceptions to raise.

    Once the script runs out the reader behaves like Ctrl+D.
    """

    def make(lines, prompt="user> "):
        script = iter(lines)
        prompts = []

        def fake_input(p):
            prompts.append(p)
            item = next(script, EOFError())
            if isinstance(item, BaseException):
                raise item
            return item

        reader = LineReader(prompt=prompt, history_file=None, input_fn=fake_input)
        reader.prompts = prompts
        return reader

    return make

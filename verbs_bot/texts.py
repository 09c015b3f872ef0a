from typing import Optional

GREETING = (
    "Hello {username}! Let's start!\n"
    "Give me a proper past and past participle form of the verbs "
    "(separate forms by whitespace)."
)
CORRECT = "Correct!"
INCORRECT = "Incorrect! The correct answer is: {answer}"
DONE = "Done!"
CHECK_FAILED = "Check function returns error"
CHECK_MALFORMED = 'Something went wrong during checking of the verb "{verb}"'


def greeting(username: Optional[str]) -> str:
    return GREETING.format(username=username or "there")


def prompt(verb: str) -> str:
    """Prompts are sent quoted."""
    return f'"{verb}"'


def incorrect(answer: Optional[str]) -> str:
    return INCORRECT.format(answer=answer or "")


def check_malformed(verb: str) -> str:
    return CHECK_MALFORMED.format(verb=verb)

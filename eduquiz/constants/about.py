"""Static metadata describing EduQuiz."""

APP_NAME = "EduQuiz"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "EduQuiz lets an author create a quiz, a taker complete it, and a reviewer "
    "grade the recorded attempts against a separately stored answer key."
)

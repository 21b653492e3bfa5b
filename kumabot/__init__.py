"""Framework-independent chat-bot features: code runner, quizzes, sign-in scores,
sleep tracking, wordle, tarot, hot words, canned replies and voice clips."""

__version__ = "0.1.0"
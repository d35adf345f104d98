"""TaskFlow -- личный список задач с генерацией задач через Gemini"""

__version__ = "1.0.0"

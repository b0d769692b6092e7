"""Uniform result envelope returned by every tool."""

from typing import Literal

from pydantic import BaseModel, Field


class TextContent(BaseModel):
    """Один блок текстового содержимого ответа."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """
    Результат вызова инструмента.

    Бизнес-ошибки не выбрасываются наружу, а возвращаются
    как обычный результат с is_error=True.

    Пример (успех):
    {
        "content": [{"type": "text", "text": "Current total points: 8"}],
        "is_error": false
    }

    Пример (ошибка):
    {
        "content": [{"type": "text", "text": "Error: Task with ID 7 not found"}],
        "is_error": true,
        "error_code": "NOT_FOUND"
    }
    """

    content: list[TextContent]
    is_error: bool = False
    error_code: str | None = Field(None, description="Машиночитаемый код ошибки")

    @classmethod
    def ok(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str, code: str | None = None) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=True, error_code=code)

    @property
    def text(self) -> str:
        """Весь текст ответа одной строкой."""
        return "\n".join(block.text for block in self.content)

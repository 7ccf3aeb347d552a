"""Benchmark fixtures and configuration."""

from __future__ import annotations

import re

import pytest


@pytest.fixture
def large_document() -> str:
    """Generate a large markdown document (~60KB)."""
    sections = []
    for i in range(100):
        sections.append(f"""
# Section {i}

This is paragraph {i} with **bold**, *italic*, and `code`.

- List item 1
- List item 2
  - Nested item

```python
def function_{i}():
    return {i}
```

| Column A | Column B |
|----------|----------|
| Cell {i} | Data {i} |

> This is a blockquote in section {i}.
> It has multiple lines.

Here is a [link](https://example.com/{i}) and an image reference.

---
""")
    return "\n".join(sections)


@pytest.fixture
def token_chunks(large_document: str) -> list[str]:
    """The large document split roughly the way a language model emits it."""
    return re.findall(r"\s+|\w+|[^\w\s]", large_document)


@pytest.fixture
def real_world_docs() -> list[str]:
    """Collection of real-world streamed response shapes."""
    return [
        # Simple paragraph
        "Hello **world**!",
        # Headers and paragraphs
        """# Title

This is a paragraph with *emphasis* and **strong**.

## Subtitle

More content here.""",
        # Code blocks
        """# API Reference

```python
client = Client(api_key="xxx")
result = client.query("SELECT * FROM users")
```

The above code demonstrates basic usage.""",
        # Code inside a quote
        """> **Note**: This is important.
>
> ```python
> code_in_quote = True
> ```

Continue reading below.""",
        # Tables
        """| Feature | goteo | batch parser |
|---------|-------|--------------|
| Streaming | Yes | No |
| Chunk-safe | Yes | n/a |""",
    ]

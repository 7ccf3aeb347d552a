"""Render model output while it is still being generated.

Tokens are fed one at a time; after each one the accumulator snapshot holds
every finished block plus the blocks still streaming.
"""

import re

from goteo import BlockAccumulator, StreamingParser

response = """## Plan

1. Read the **config**
2. Run the `migrate` step

```bash
goteo --check
```

| step | status |
|------|:------:|
| read | done |
| run  | pending |
"""

# Crude tokenizer: words, whitespace runs and punctuation, like a model emits.
tokens = re.findall(r"\s+|\w+|[^\w\s]", response)

parser, blocks = StreamingParser(), BlockAccumulator()
for token in tokens:
    blocks.extend(parser.feed(token))
blocks.extend(parser.finalize())

for block in blocks.blocks:
    print(f"{block.id:>5} {block.type.value:<10} {block.content!r}")
    if block.table is not None:
        print("      rows:", block.table.rows)

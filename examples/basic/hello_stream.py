"""Stream Markdown in a few lines: events arrive as soon as structure is known."""

from goteo import StreamingParser

parser = StreamingParser()

for chunk in ["# Hel", "lo **Wor", "ld**\n\nSome ", "text"]:
    for event in parser.feed(chunk):
        print(event)

for event in parser.finalize():
    print(event)

"""Benchmark streaming throughput by chunk size.

Feeding token-sized chunks should cost a small constant factor over feeding
the whole document at once; anything worse points at rescanning.

Run with:
    pytest benchmarks/benchmark_streaming.py -v --benchmark-only
"""

import pytest

from goteo import StreamingParser, parse_stream


def _drain(chunks: list[str]) -> int:
    return sum(1 for _ in parse_stream(chunks))


@pytest.mark.benchmark(group="streaming")
def test_benchmark_single_chunk(benchmark, large_document):
    """Baseline: the whole document in one feed."""
    benchmark(_drain, [large_document])


@pytest.mark.benchmark(group="streaming")
def test_benchmark_token_chunks(benchmark, token_chunks):
    """Word-sized chunks, like model output."""
    benchmark(_drain, token_chunks)


@pytest.mark.benchmark(group="streaming")
def test_benchmark_character_chunks(benchmark, large_document):
    """Worst case: one character per feed."""
    benchmark(_drain, list(large_document))


@pytest.mark.benchmark(group="streaming-small")
def test_benchmark_real_world_docs(benchmark, real_world_docs):
    """Many short responses, one parser each."""

    def run() -> None:
        for doc in real_world_docs:
            parser = StreamingParser()
            for char in doc:
                parser.feed(char)
            parser.finalize()

    benchmark(run)

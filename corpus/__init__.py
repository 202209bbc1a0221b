"""
Corpus loading and generation, kept outside the scoring core.

Import the concrete modules directly, e.g.:

    from corpus.json_file import load_corpus, dump_corpus
    from corpus.synthetic import generate_corpus
"""
__all__: list[str] = []

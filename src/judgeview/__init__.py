"""
judgeview

Relevance-judgment browser:
- parsers: query catalog ({dataset}.tsv) and per-shot judgments ({dataset}_result.tsv)
- filters: judgement x stratum filter engine
- session: per-operator state machine over a text fetcher
- cli: `judgeview` command (queries | show | labels | browse)
"""

__version__ = "0.1.0"

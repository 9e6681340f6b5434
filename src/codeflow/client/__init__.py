"""Collaborators used by strategies to reach providers.

- :class:`HTTPAdapter` / :class:`HttpxAdapter` -- perform HTTP requests.
- :class:`JSONCodec` -- decode JSON payloads.
"""

from codeflow.client.adapter import HTTPAdapter, HttpxAdapter
from codeflow.client.codec import JSONCodec, decode_body, decode_form

__all__ = ["HTTPAdapter", "HttpxAdapter", "JSONCodec", "decode_body", "decode_form"]

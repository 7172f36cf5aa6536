import sys
from typing import List, NamedTuple, Optional, Tuple

from google.cloud import storage

from rank_graph import PageRankError


class MalformedInputError(PageRankError):
    pass


class EdgeStream(NamedTuple):
    edge_count: int
    iteration_count: int
    edges: List[Tuple[str, str]]


def _parse_count(token: str, name: str) -> int:
    try:
        value = int(token, 10)
    except ValueError:
        raise MalformedInputError(f"{name} must be an integer, got {token!r}") from None
    if value < 0:
        raise MalformedInputError(f"{name} must be >= 0, got {value}")
    return value


def parse_edge_stream(text: str) -> EdgeStream:
    """
    Token stream:
      edge_count iteration_count from_1 to_1 ... from_n to_n
    separated by any whitespace.
    """
    tokens = text.split()
    if len(tokens) < 2:
        raise MalformedInputError("expected edge count and iteration count")

    edge_count = _parse_count(tokens[0], "edge count")
    iteration_count = _parse_count(tokens[1], "iteration count")

    body = tokens[2:]
    expected = 2 * edge_count
    if len(body) < expected:
        raise MalformedInputError(
            f"declared {edge_count} edges but found {len(body) // 2} "
            f"({len(body)} endpoint tokens)"
        )
    if len(body) > expected:
        raise MalformedInputError(
            f"declared {edge_count} edges but {len(body) - expected} extra tokens follow"
        )

    edges = [(body[i], body[i + 1]) for i in range(0, expected, 2)]
    return EdgeStream(edge_count, iteration_count, edges)


# Labels are opaque bytes; undecodable bytes survive as lone surrogates and are
# written back out unchanged by encode_label.
LABEL_ENCODING = "utf-8"
LABEL_ERRORS = "surrogateescape"


def decode_input(data: bytes) -> str:
    return data.decode(LABEL_ENCODING, LABEL_ERRORS)


def encode_label(text: str) -> bytes:
    return text.encode(LABEL_ENCODING, LABEL_ERRORS)


def read_local(path: Optional[str] = None) -> str:
    if path is None or path == "-":
        try:
            return decode_input(sys.stdin.buffer.read())
        except OSError as e:
            raise MalformedInputError(f"cannot read stdin: {e}") from e
    try:
        with open(path, "rb") as f:
            return decode_input(f.read())
    except OSError as e:
        raise MalformedInputError(f"cannot read {path}: {e.strerror or e}") from e


def read_gcs(bucket_name: str, object_name: str, client: Optional[storage.Client] = None) -> str:
    client = client or storage.Client()
    object_name = object_name.lstrip("/")
    blob = client.bucket(bucket_name).blob(object_name)
    if not blob.exists(client):
        raise MalformedInputError(f"gs://{bucket_name}/{object_name} not found")
    return decode_input(blob.download_as_bytes())


def load_edge_stream(
    path: Optional[str] = None,
    bucket: Optional[str] = None,
    object_name: Optional[str] = None,
    client: Optional[storage.Client] = None,
) -> EdgeStream:
    if bucket:
        if not object_name:
            raise MalformedInputError("an object name is required when reading from a bucket")
        text = read_gcs(bucket, object_name, client)
    else:
        text = read_local(path)
    return parse_edge_stream(text)


def describe_source(path: Optional[str], bucket: Optional[str], object_name: Optional[str]) -> str:
    if bucket:
        return f"gs://{bucket}/{(object_name or '').lstrip('/')}"
    if path is None or path == "-":
        return "stdin"
    return path

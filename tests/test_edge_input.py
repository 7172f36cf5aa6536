import pytest

import edge_input
from edge_input import MalformedInputError, load_edge_stream, parse_edge_stream


class FakeBlob:
    def __init__(self, data):
        self.data = data

    def exists(self, client):
        return self.data is not None

    def download_as_bytes(self):
        return self.data


class FakeBucket:
    def __init__(self, objects):
        self.objects = objects

    def blob(self, name):
        return FakeBlob(self.objects.get(name))


class FakeClient:
    def __init__(self, objects):
        self.objects = objects
        self.buckets = []

    def bucket(self, name):
        self.buckets.append(name)
        return FakeBucket(self.objects)


def test_parse_any_whitespace():
    stream = parse_edge_stream("3 3\nA B\n  B\tC\r\nC A\n")
    assert stream.edge_count == 3
    assert stream.iteration_count == 3
    assert stream.edges == [("A", "B"), ("B", "C"), ("C", "A")]


def test_parse_zero_edges():
    stream = parse_edge_stream("0 5")
    assert stream.edges == []


@pytest.mark.parametrize("text", [
    "",
    "3",
    "x 2 A B",
    "1 two A B",
    "1.5 2 A B",
    "-1 2",
    "1 -2 A B",
    "2 2 A B C",
    "1 2 A B C",
    "1 2 A B C D",
])
def test_parse_rejects_malformed(text):
    with pytest.raises(MalformedInputError):
        parse_edge_stream(text)


def test_short_stream_message_counts_edges():
    with pytest.raises(MalformedInputError, match="declared 3 edges but found 1"):
        parse_edge_stream("3 2 A B C")


def test_load_from_file(tmp_path):
    path = tmp_path / "edges.txt"
    path.write_text("1 2\nA B\n", encoding="utf-8")
    assert load_edge_stream(str(path)).edges == [("A", "B")]


def test_load_from_bucket():
    client = FakeClient({"graphs/edges.txt": b"2 4 A B B A"})
    stream = load_edge_stream(bucket="my-bucket", object_name="/graphs/edges.txt", client=client)

    assert client.buckets == ["my-bucket"]
    assert stream.iteration_count == 4
    assert stream.edges == [("A", "B"), ("B", "A")]


def test_missing_bucket_object():
    with pytest.raises(MalformedInputError, match="gs://my-bucket/nope.txt"):
        load_edge_stream(bucket="my-bucket", object_name="nope.txt", client=FakeClient({}))


def test_bucket_without_object_name():
    with pytest.raises(MalformedInputError):
        load_edge_stream(bucket="my-bucket", client=FakeClient({}))


def test_describe_source():
    assert edge_input.describe_source(None, None, None) == "stdin"
    assert edge_input.describe_source("-", None, None) == "stdin"
    assert edge_input.describe_source("e.txt", None, None) == "e.txt"
    assert edge_input.describe_source(None, "b", "/o.txt") == "gs://b/o.txt"


def test_bucket_bytes_decoded_losslessly():
    client = FakeClient({"e.txt": b"1 1 \xff\xfe B"})
    stream = load_edge_stream(bucket="b", object_name="e.txt", client=client)

    (source, target), = stream.edges
    assert edge_input.encode_label(source) == b"\xff\xfe"
    assert target == "B"


def test_missing_local_file(tmp_path):
    with pytest.raises(MalformedInputError, match="cannot read"):
        load_edge_stream(str(tmp_path / "missing.txt"))

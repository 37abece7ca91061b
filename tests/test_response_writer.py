import pytest

from gintonic.response_writer import Header, ResponseRecorder, ResponseWriter


def make_writer():
    recorder = ResponseRecorder()
    writer = ResponseWriter()
    writer.reset(recorder)
    return writer, recorder


def test_unwrap():
    recorder = ResponseRecorder()
    writer = ResponseWriter(recorder)
    assert writer.unwrap() is recorder


def test_reset():
    recorder = ResponseRecorder()
    writer = ResponseWriter()
    writer.reset(recorder)
    assert writer.size == -1
    assert writer.status == 200
    assert writer.writer is recorder
    assert writer.written is False


def test_write_header():
    writer, recorder = make_writer()
    writer.write_header(300)
    assert writer.written is False
    assert writer.status == 300
    assert recorder.code != 300

    writer.write_header(-1)
    assert writer.status == 300


def test_write_header_now():
    writer, recorder = make_writer()
    writer.write_header(300)
    writer.write_header_now()
    assert writer.written is True
    assert writer.size == 0
    assert recorder.code == 300

    writer.size = 10
    writer.write_header_now()
    assert writer.size == 10


def test_write():
    writer, recorder = make_writer()
    n = writer.write(b"hola")
    assert n == 4
    assert writer.size == 4
    assert writer.status == 200
    assert recorder.code == 200
    assert recorder.text == "hola"

    n = writer.write(b" adios")
    assert n == 6
    assert writer.size == 10
    assert recorder.text == "hola adios"


def test_write_string():
    writer, recorder = make_writer()
    assert writer.write_string("hola") == 4
    assert writer.size == 4
    assert bytes(recorder.body) == b"hola"


def test_hijack_and_close_notify_unsupported():
    writer, recorder = make_writer()
    with pytest.raises(TypeError):
        writer.hijack()
    assert writer.written is True

    with pytest.raises(TypeError):
        writer.close_notify()

    writer.flush()
    assert recorder.flushed is True


def test_hijack_supported():
    class Hijackable(ResponseRecorder):
        def hijack(self):
            return "connection"

    writer = ResponseWriter(Hijackable())
    assert writer.hijack() == "connection"
    assert writer.size == 0


def test_flush_sends_status():
    writer, recorder = make_writer()
    writer.write_header(500)
    writer.flush()
    assert recorder.code == 500
    assert recorder.flushed is True


def test_status_code_cannot_change_after_written():
    writer, _ = make_writer()
    writer.write_header(200)
    writer.write_header_now()
    assert writer.status == 200
    assert writer.written is True

    writer.write_header(401)
    assert writer.status == 200


def test_pusher_with_pusher():
    class Pusher(ResponseRecorder):
        def push(self, target, options=None):
            return None

    target = Pusher()
    writer = ResponseWriter(target)
    assert writer.pusher() is target


def test_pusher_without_pusher():
    writer = ResponseWriter(ResponseRecorder())
    assert writer.pusher() is None


def test_header_is_case_insensitive():
    header = Header({"x-request-id": "requestId"})
    assert header.get("X-Request-Id") == "requestId"
    assert "X-REQUEST-ID" in header
    assert list(header) == ["X-Request-Id"]


def test_header_add_set_and_delete():
    header = Header()
    assert header.get("Allow") == ""
    header.add("allow", "GET")
    header.add("Allow", "POST")
    assert header.get_all("ALLOW") == ["GET", "POST"]
    header.set("Allow", "PUT")
    assert header.get_all("allow") == ["PUT"]
    header.set_all("Allow", ["A", "B"])
    assert header.get("allow") == "A"
    del header["allow"]
    assert "Allow" not in header
    assert len(header) == 0


def test_recorder_rejects_invalid_code():
    recorder = ResponseRecorder()
    with pytest.raises(ValueError):
        recorder.write_header(42)
    recorder.write_header(404)
    recorder.write_header(500)
    assert recorder.code == 404
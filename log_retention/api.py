"""Flask API over the log directory: tail, list, open, download."""

import logging

from flask import Flask, Response, jsonify, request, send_file

from log_retention.broadcaster import TailBroadcaster
from log_retention.directory import LogDirectory
from log_retention.errors import DirectoryError, InvalidPathError, LogFileError

logger = logging.getLogger(__name__)

CODE_OK = 0
CODE_OPEN_FAILED = 1


def _ok(**extra):
    return jsonify(code=CODE_OK, message="ok", **extra)


def _error(code: int, message: str, status: int = 500):
    return jsonify(code=code, message=message), status


def _sse_event(chunk: bytes) -> str:
    """Format one written chunk as a server-sent event."""
    lines = chunk.decode("utf-8", errors="replace").splitlines() or [""]
    return "".join(f"data: {line}\n" for line in lines) + "\n"


def create_app(directory: LogDirectory, broadcaster: TailBroadcaster,
               writer_enabled: bool = True, keepalive_seconds: float = 15.0) -> Flask:
    app = Flask(__name__)
    app.config["components"] = {
        "directory": directory,
        "broadcaster": broadcaster,
    }

    def _send(name: str, attachment: bool):
        try:
            if attachment:
                f, download_name = directory.download(name)
            else:
                f, download_name = directory.open(name), None
        except InvalidPathError:
            logger.warning("Rejected file request for %r", name)
            return Response("invalid file\n", status=400, mimetype="text/plain")
        except LogFileError as e:
            return _error(CODE_OPEN_FAILED, f"open failed: {e}")

        if attachment:
            return send_file(f, mimetype="application/octet-stream",
                             as_attachment=True, download_name=download_name)
        return send_file(f, mimetype="text/plain")

    @app.route("/api/tail")
    def tail():
        # Subscribe only once the body is iterated; HEAD never starts the generator
        def generate():
            sub = broadcaster.subscribe()
            try:
                yield ": connected\n\n"
                for chunk in sub.stream(poll_interval=keepalive_seconds):
                    if chunk is None:
                        yield ": keep-alive\n\n"
                    else:
                        yield _sse_event(chunk)
            finally:
                broadcaster.unsubscribe(sub)

        return Response(
            generate(),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.route("/api/list")
    def list_files():
        try:
            entries = directory.list()
        except DirectoryError as e:
            return _error(CODE_OPEN_FAILED, f"open failed: {e}")
        return _ok(data=[entry.to_dict() for entry in entries])

    @app.route("/api/open")
    def open_file():
        return _send(request.args.get("file", ""), attachment=False)

    @app.route("/api/download")
    def download_file():
        return _send(request.args.get("file", ""), attachment=True)

    @app.route("/health")
    def health():
        return jsonify(
            status="ok",
            writer=writer_enabled,
            tail_subscribers=broadcaster.subscriber_count,
        )

    return app

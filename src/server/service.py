from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import Server, ServerConnection
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import StickyEventStore, make_event, parse_command

CommandHandler = Callable[[dict[str, Any]], None]


class UIServer:
    """Asyncio server for the static timer page and its websocket channel.

    Runs on the same event loop as the countdown, so commands received from
    the page are dispatched without any cross-thread hand-off.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._server: Optional[Server] = None
        self._connected_clients: set[ServerConnection] = set()
        self._sticky_events = StickyEventStore()
        self._command_handler: Optional[CommandHandler] = None
        self._index_html = Path(self._config.index_file).read_bytes()

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def websocket_path(self) -> str:
        return self._config.websocket_path

    @property
    def is_running(self) -> bool:
        return self._server is not None

    def set_command_handler(self, handler: CommandHandler) -> None:
        self._command_handler = handler

    async def start(self) -> None:
        if self._server is not None:
            self._logger.warning("UI server is already running")
            return

        self._server = await websockets.serve(
            self._handler,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        )
        self._logger.info(
            "UI server running at http://%s:%d (websocket: %s)",
            self._config.host,
            self._config.port,
            self._config.websocket_path,
        )

    async def stop(self) -> None:
        server = self._server
        if server is None:
            return

        self._server = None
        await self._close_clients()
        server.close()
        await server.wait_closed()

    def publish(self, event_type: str, **payload: Any) -> None:
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)
        if not self.is_running or not self._connected_clients:
            return

        task = asyncio.get_running_loop().create_task(self._broadcast(message))
        task.add_done_callback(self._consume_task_exception)

    @staticmethod
    def _consume_task_exception(task: asyncio.Task) -> None:
        with contextlib.suppress(asyncio.CancelledError, Exception):
            task.result()

    async def _handler(self, websocket: ServerConnection) -> None:
        request_path = (
            urlsplit(websocket.request.path).path
            if websocket.request is not None
            else ""
        )
        if request_path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        self._connected_clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(make_event(EVENT_HELLO, message="UI websocket connected"))
            for message in self._sticky_events.snapshot():
                await websocket.send(message)

            async for raw in websocket:
                self._handle_message(websocket, raw)
        except websockets.exceptions.ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)
        finally:
            self._connected_clients.discard(websocket)

    def _handle_message(self, websocket: ServerConnection, raw: str | bytes) -> None:
        command = parse_command(raw)
        if command is None:
            self._logger.debug("Ignoring malformed UI message: %s", raw)
            self._send_error(websocket, "Message invalide.")
            return

        self._logger.debug("Received command from UI: %s", command)
        if self._command_handler is None:
            return
        try:
            self._command_handler(command)
        except Exception as error:
            self._logger.error("Command handler failed for %s: %s", command, error, exc_info=True)
            self._send_error(websocket, "La commande a échoué.")

    def _send_error(self, websocket: ServerConnection, message: str) -> None:
        task = asyncio.get_running_loop().create_task(
            websocket.send(make_event(EVENT_ERROR, message=message))
        )
        task.add_done_callback(self._consume_task_exception)

    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection  # Unused in static routing.
        path = urlsplit(request.path).path

        if path == self._config.websocket_path:
            return None

        if path in (ROOT_PATH, INDEX_PATH):
            return self._response(
                200,
                "OK",
                self._index_html,
                "text/html; charset=utf-8",
            )

        if path == HEALTHZ_PATH:
            return self._response(
                200,
                "OK",
                b"ok\n",
                "text/plain; charset=utf-8",
            )

        return self._response(
            404,
            "Not Found",
            b"not found\n",
            "text/plain; charset=utf-8",
        )

    @staticmethod
    def _response(
        status_code: int,
        reason_phrase: str,
        body: bytes,
        content_type: str,
    ) -> Response:
        headers = Headers()
        headers["Content-Type"] = content_type
        headers["Content-Length"] = str(len(body))
        headers["Cache-Control"] = "no-store"
        return Response(status_code, reason_phrase, headers, body)

    async def _close_clients(self) -> None:
        if not self._connected_clients:
            return

        tasks = [
            client.close(code=1001, reason="Server shutting down")
            for client in tuple(self._connected_clients)
        ]
        await asyncio.gather(*tasks, return_exceptions=True)
        self._connected_clients.clear()

    async def _broadcast(self, message: str) -> None:
        clients = tuple(self._connected_clients)
        results = await asyncio.gather(
            *(client.send(message) for client in clients),
            return_exceptions=True,
        )
        for client, result in zip(clients, results):
            if isinstance(result, Exception):
                self._logger.warning("Failed to send message to client: %s", result)
                self._connected_clients.discard(client)

"""Bootstrap helpers for wiring the backend bridge into UI runtime state."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.client import BridgeClient
from mod_deck.bridge.errors import BackendError
from mod_deck.bridge.transport import ProcessTransport, SocketTransport, Transport
from mod_deck.config import AppConfig
from mod_deck.ui.preferences import PreferenceStore
from mod_deck.ui.settings import SettingsStore
from mod_deck.ui.state import UiState


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AppSession:
    """Runtime objects needed by UI pages/controllers."""

    client: BridgeClient
    backend: ModBackend
    settings: SettingsStore
    prefs: PreferenceStore

    def close(self) -> None:
        self.client.close()


def transport_for(config: AppConfig) -> Transport:
    """A spawned backend command wins over a socket address."""
    if config.backend_command:
        return ProcessTransport(config.backend_command)
    assert config.socket_address is not None
    return SocketTransport(config.socket_address)


def bootstrap_session(
    config: AppConfig | None = None,
    transport: Transport | None = None,
) -> tuple[AppSession, UiState]:
    """Connect to the backend and load settings and game identity.

    Connection failures propagate; a backend that answers but fails the
    settings or game lookups still yields a usable session.
    """
    config = config or AppConfig.from_env()
    client = BridgeClient(transport or transport_for(config), call_timeout=config.call_timeout)
    client.start()

    backend = ModBackend(client)
    assert config.prefs_path is not None
    session = AppSession(
        client=client,
        backend=backend,
        settings=SettingsStore(backend),
        prefs=PreferenceStore(config.prefs_path),
    )
    session.settings.load()

    state = UiState(backend_connected=True)
    try:
        state.active_game = backend.get_active_game()
    except BackendError as exc:
        logger.warning("Failed to fetch active game: %s", exc)
    client.on_close(lambda _reason: setattr(state, "backend_connected", False))
    return session, state

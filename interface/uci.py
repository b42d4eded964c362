"""
UCI (Universal Chess Interface) protocol handler.

UCI is the text protocol chess GUIs and match runners (cutechess-cli, Arena,
lichess-bot) use to talk to engines. The GUI writes one command per line to
the engine's stdin; the engine answers on stdout. Every output line is
flushed immediately, because GUIs read line by line and would otherwise wait
on output that is sitting in a buffer.

Protocol overview:
    GUI -> Engine: uci, isready, position, go, stop, quit
                   (setoption, register, ucinewgame, debug, ponderhit are
                   accepted and ignored)
    Engine -> GUI: id name, id author, uciok, readyok, info, bestmove

Execution model:
    Everything runs on one thread. After each command the loop checks the
    session: if a "go" made it active, the search runs to completion right
    there, before the next line is read. A TIMED search reports its move at
    once. An INFINITE search ("go infinite") keeps its move cached until
    "stop" arrives. "stop" therefore never interrupts a search; by the time
    it is read, the search has already finished.

Critical rule: NEVER print to stdout except valid UCI responses. Diagnostics
go through the logging module, which the entry point points at stderr.
"""

import logging
import os
import sys
import time
from typing import TextIO

# ---------------------------------------------------------------------------
# Path setup: make 'engine' importable when this script is run directly as
# `python interface/uci.py` from the repo root.
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess

from engine.config import EngineConfig, load_config
from engine.constants import BLACK_WIN_SCORE, WHITE_WIN_SCORE
from engine.errors import IllegalMoveError, ParseError
from engine.rules import DEFAULT_RULES, RulesProvider
from engine.session import EngineSession, SearchMode

_log = logging.getLogger(__name__)

# "go" arguments that are followed by a numeric value. They are accepted so a
# GUI's clock information does not produce warnings, but the search depth is
# fixed and none of them changes it.
_GO_VALUE_ARGS = frozenset(
    {"wtime", "btime", "winc", "binc", "movestogo", "depth", "nodes", "movetime", "mate"}
)

# Commands that are part of the protocol but have no effect on this engine.
_IGNORED_COMMANDS = frozenset({"setoption", "register", "ucinewgame", "debug", "ponderhit"})


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Owns the EngineSession and the output stream. run_uci_loop() creates one
    instance and feeds it lines with process_line().

    Attributes:
        session: Current position, active flag, search mode and cached move.
        out:     Stream receiving protocol lines (stdout in production).
        config:  Engine identity and search depth.
    """

    def __init__(
        self,
        out: TextIO,
        config: EngineConfig | None = None,
        rules: RulesProvider = DEFAULT_RULES,
    ) -> None:
        self.out = out
        self.config = config or EngineConfig()
        self.rules = rules
        self.session = EngineSession(depth=self.config.search_depth, rules=rules)

    def _send(self, line: str) -> None:
        """Write one protocol line and flush it."""
        print(line, file=self.out, flush=True)

    # -----------------------------------------------------------------------
    # Dispatch
    # -----------------------------------------------------------------------

    def process_line(self, line: str) -> bool:
        """
        Handle one input line, then advance the session.

        Returns:
            False when the loop should stop ("quit"), True otherwise.
        """
        tokens = line.split()
        if not tokens:
            return True

        command = tokens[0]
        args = tokens[1:]

        if command == "quit":
            return False

        try:
            self.dispatch(command, args)
        except Exception:
            # A bug in one handler must not take the engine down mid-game.
            _log.exception("uci: unhandled error for command %r", command)

        try:
            self.advance()
        except Exception:
            _log.exception("uci: search failed after command %r", command)
            self.session.deactivate()
        return True

    def dispatch(self, command: str, args: list[str]) -> None:
        if command == "uci":
            self.handle_uci()
        elif command == "isready":
            self.handle_isready()
        elif command == "position":
            self.handle_position(args)
        elif command == "go":
            self.handle_go(args)
        elif command == "stop":
            self.handle_stop()
        elif command in _IGNORED_COMMANDS:
            _log.info("uci: %s unsupported, ignoring", command)
        else:
            _log.warning("uci: unknown command %r", command)

    def advance(self) -> None:
        """
        Run the pending search, if any, and report it unless it is INFINITE.

        Called after every command. When the search finds nothing to play
        (the position has no legal moves) no bestmove line is written and
        the session is deactivated all the same.
        """
        if not self.session.active:
            return

        start = time.monotonic()
        self.session.run_search()
        if self.session.search_mode is SearchMode.INFINITE:
            return

        if self.session.best_move is None:
            _log.warning("uci: no move to report, dropping search")
        else:
            elapsed_ms = max(1, int((time.monotonic() - start) * 1000))
            self._send_info(elapsed_ms)
            self._send_best_move()
        self.session.deactivate()

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        """Identify the engine. No options are offered, so uciok follows directly."""
        self._send(f"id name {self.config.engine_name}")
        self._send(f"id author {self.config.engine_author}")
        self._send("uciok")

    def handle_isready(self) -> None:
        self._send("readyok")

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos [moves e2e4 e7e5 ...]
            position fen <FEN> [moves e2e4 e7e5 ...]
            position <FEN> [moves ...]            ("fen" keyword optional)

        A malformed FEN leaves the current position unchanged. An illegal
        move aborts the replay; the position is set to the last state that
        was reached legally.

        Args:
            tokens: Command tokens with "position" stripped.
        """
        if not tokens:
            _log.warning("uci: invalid position command")
            return

        if tokens[0] == "startpos":
            board = self.rules.starting_position()
            rest = tokens[1:]
        else:
            fen_tokens = tokens[1:] if tokens[0] == "fen" else tokens
            if "moves" in fen_tokens:
                moves_idx = fen_tokens.index("moves")
                fen = " ".join(fen_tokens[:moves_idx])
                rest = fen_tokens[moves_idx:]
            else:
                fen = " ".join(fen_tokens)
                rest = []
            try:
                board = self.rules.parse_position(fen)
            except ParseError as exc:
                _log.warning("uci: %s", exc)
                return

        move_tokens: list[str] = []
        if rest and rest[0] == "moves":
            move_tokens = rest[1:]
        elif rest:
            _log.warning("uci: unexpected tokens in position command: %s", " ".join(rest))

        for move_text in move_tokens:
            try:
                board = self.rules.apply_move(board, move_text)
            except IllegalMoveError as exc:
                _log.warning("uci: %s, replay stopped", exc)
                break

        self.session.set_position(board)

    def handle_go(self, tokens: list[str]) -> None:
        """
        Parse a "go" command and activate the session.

        Only "infinite" changes anything: it makes the session hold its move
        until "stop". Clock and limit arguments are consumed with their values
        and ignored, since the search depth is fixed.

        Args:
            tokens: Command tokens with "go" stripped.
        """
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token == "infinite":
                self.session.search_mode = SearchMode.INFINITE
            elif token in _GO_VALUE_ARGS:
                i += 1
            elif token == "searchmoves":
                # Everything after searchmoves is a move list.
                break
            elif token != "ponder":
                _log.warning("uci: unknown go argument %r", token)
            i += 1

        self.session.activate()

    def handle_stop(self) -> None:
        """Report the cached move, if there is one, and deactivate."""
        if not self.session.active:
            _log.debug("uci: stop received with no search pending")
            return
        if self.session.best_move is not None:
            self._send_best_move()
        else:
            _log.warning("uci: stop received but no move was found")
        self.session.deactivate()

    # -----------------------------------------------------------------------
    # Output helpers
    # -----------------------------------------------------------------------

    def _send_best_move(self) -> None:
        position = self.session.current_position
        notation = self.rules.format_move(position, self.session.best_move)
        self._send(f"bestmove {notation}")

    def _send_info(self, elapsed_ms: int) -> None:
        """
        Emit search statistics for the last search.

        UCI scores are relative to the side to move, while the engine scores
        from White's side, so Black's scores are negated. Decided games have
        no distance-to-mate available and are reported without a score.
        """
        parts = [f"info depth {self.session.depth}"]
        score = self.session.last_score
        if score is not None and score not in (WHITE_WIN_SCORE, BLACK_WIN_SCORE):
            if self.rules.side_to_move(self.session.current_position) == chess.BLACK:
                score = -score
            parts.append(f"score cp {score}")
        parts.append(f"nodes {self.session.nodes} time {elapsed_ms}")
        self._send(" ".join(parts))


def run_uci_loop(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    config: EngineConfig | None = None,
) -> None:
    """
    Main UCI protocol loop.

    Reads lines until "quit" or end of input. Errors in individual commands
    are logged and the loop continues; only those two conditions end it.
    """
    handler = UciHandler(stdout or sys.stdout, config)
    for raw_line in stdin or sys.stdin:
        if not handler.process_line(raw_line.strip()):
            break


def main() -> None:
    config = load_config()
    logging.basicConfig(
        stream=sys.stderr,
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_uci_loop(config=config)


if __name__ == "__main__":
    main()

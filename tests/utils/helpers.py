# tests/utils/helpers.py


def receive_until(ws, kind: str, limit: int = 20) -> dict:
    """Read frames until one of ``kind`` arrives; fail if it never does."""
    seen = []
    for _ in range(limit):
        msg = ws.receive_json()
        if msg["kind"] == kind:
            return msg
        seen.append(msg["kind"])
    raise AssertionError(f"no {kind!r} frame, got {seen}")


def handshake(ws, player_id: str, name: str = "player") -> None:
    ws.send_json({"kind": "handshake", "player_id": player_id, "name": name})


def move(ws, frm: tuple[int, int], to: tuple[int, int]) -> None:
    ws.send_json(
        {"kind": "move", "from_x": frm[0], "from_y": frm[1], "to_x": to[0], "to_y": to[1]}
    )


def kill(ws, x: int, y: int) -> None:
    ws.send_json({"kind": "kill", "x": x, "y": y})


def occupied(board_msg: dict) -> dict[tuple[int, int], str]:
    return {
        (s["x"], s["y"]): s["piece"]["owner_id"]
        for s in board_msg["revealed"] + board_msg["own"]
        if s["piece"] is not None
    }

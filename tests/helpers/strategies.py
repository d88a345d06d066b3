from __future__ import annotations

from hypothesis import strategies as st

from netquest.domain.types import DialogueLine, Speaker
from netquest.rules.catalog import MissionCatalog
from netquest.systems.purchasing import CartLine


def firewall_toggles() -> st.SearchStrategy[dict[str, bool]]:
    return st.fixed_dictionaries(
        {
            "block-inbound": st.booleans(),
            "allow-established": st.booleans(),
            "block-icmp": st.booleans(),
        }
    )


def octet(min_value: int = 0, max_value: int = 255) -> st.SearchStrategy[int]:
    return st.integers(min_value=min_value, max_value=max_value)


def ipv4() -> st.SearchStrategy[str]:
    return st.tuples(octet(), octet(), octet(), octet()).map(lambda parts: ".".join(str(p) for p in parts))


def lan_ip(prefix: str = "192.168.1.") -> st.SearchStrategy[str]:
    return octet(2, 254).map(lambda host: f"{prefix}{host}")


def dialogue_lines(min_size: int = 0, max_size: int = 6) -> st.SearchStrategy[list[DialogueLine]]:
    return st.lists(
        st.builds(
            DialogueLine,
            id=st.uuids().map(str),
            speaker=st.sampled_from(list(Speaker)),
            text=st.text(max_size=20),
        ),
        min_size=min_size,
        max_size=max_size,
    )


def carts(mission: MissionCatalog) -> st.SearchStrategy[tuple[CartLine, ...]]:
    return st.lists(
        st.builds(CartLine, item_id=st.sampled_from(sorted(mission.store_items)), quantity=st.integers(0, 8)),
        max_size=6,
        unique_by=lambda line: line.item_id,
    ).map(tuple)

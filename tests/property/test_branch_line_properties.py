from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from branchdeck.git.backend import parse_branch_lines

_NAME_CHARS = st.sampled_from("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_/.")
_NAMES = st.text(alphabet=_NAME_CHARS, min_size=1, max_size=24)
_TRACKS = st.sampled_from(["", "[ahead 1]", "[behind 2]", "[gone]"])


@st.composite
def _listing(draw: st.DrawFn) -> tuple[list[str], int | None, list[str | None], str]:
    names = draw(st.lists(_NAMES, min_size=0, max_size=15, unique=True))
    head = draw(st.none() | st.integers(min_value=0, max_value=max(len(names) - 1, 0)))
    if not names:
        head = None
    upstreams: list[str | None] = []
    lines = []
    for index, name in enumerate(names):
        marker = "*" if index == head else " "
        upstream = draw(st.none() | st.sampled_from(["origin/main", "upstream/dev"]))
        track = draw(_TRACKS)
        upstreams.append(upstream)
        lines.append("\x00".join([marker, name, upstream or "", track]))
    return names, head, upstreams, "\n".join(lines)


@given(_listing())
def test_parsed_names_head_and_upstreams_match_listing(
    listing: tuple[list[str], int | None, list[str | None], str],
) -> None:
    names, head, upstreams, output = listing

    branches = parse_branch_lines(output)

    assert [branch.name for branch in branches] == names
    heads = [index for index, branch in enumerate(branches) if branch.is_head]
    assert heads == ([] if head is None else [head])
    assert [branch.upstream.name if branch.upstream else None for branch in branches] == upstreams

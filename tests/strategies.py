"""Hypothesis strategies shared by the property tests."""

from hypothesis import strategies as st

from almanac_pipeline import MappingTable, Rule


@st.composite
def rules(draw, max_value=200):
    """A rule with small coordinates so brute enumeration stays cheap."""
    source_start = draw(st.integers(min_value=0, max_value=max_value))
    length = draw(st.integers(min_value=1, max_value=50))
    destination_start = draw(st.integers(min_value=0, max_value=max_value))
    return Rule(source_start=source_start, length=length, destination_start=destination_start)


@st.composite
def tables(draw, name="a-to-b"):
    # overlaps allowed: every lookup path resolves them first-wins
    return MappingTable(name, tuple(draw(st.lists(rules(), min_size=0, max_size=6))))


@st.composite
def seed_ranges(draw):
    start = draw(st.integers(min_value=0, max_value=300))
    length = draw(st.integers(min_value=1, max_value=60))
    return (start, length)


seed_range_lists = st.lists(seed_ranges(), min_size=1, max_size=5)

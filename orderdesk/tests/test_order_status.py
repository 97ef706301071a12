"""Status state machine: forward, one step at a time, nothing else."""

import itertools

import pytest
from hypothesis import given
from hypothesis import strategies as st

from orderdesk.app.domain import OrderStatus, advance, can_transition
from orderdesk.app.errors import InvalidTransition

LEGAL = {
    (OrderStatus.PENDING, OrderStatus.PREPARING),
    (OrderStatus.PREPARING, OrderStatus.COMPLETED),
}


@pytest.mark.parametrize("src,dst", sorted(LEGAL))
def test_legal_transitions(src, dst):
    assert can_transition(src, dst)
    assert advance(src, dst) is dst


@pytest.mark.parametrize(
    "src,dst",
    [pair for pair in itertools.product(OrderStatus, repeat=2) if pair not in LEGAL],
)
def test_every_other_pair_is_rejected(src, dst):
    assert not can_transition(src, dst)
    with pytest.raises(InvalidTransition) as exc:
        advance(src, dst)
    assert exc.value.details == {"from": src.value, "to": dst.value}


def test_completed_is_terminal():
    for dst in OrderStatus:
        assert not can_transition(OrderStatus.COMPLETED, dst)


@given(st.lists(st.sampled_from(list(OrderStatus)), max_size=10))
def test_any_request_sequence_only_moves_forward(requests):
    order = [OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.COMPLETED]
    status = OrderStatus.PENDING
    for requested in requests:
        try:
            new = advance(status, requested)
        except InvalidTransition:
            continue
        assert order.index(new) == order.index(status) + 1
        status = new

from skirmish.domain.resources import MIN_EFFECTIVENESS, pay_cost


def test_full_payment_keeps_full_strength() -> None:
    payment = pay_cost(50, 20)

    assert payment.paid == 20
    assert payment.remaining == 30
    assert payment.multiplier == 1.0
    assert payment.weakened is False


def test_shortfall_scales_effectiveness() -> None:
    payment = pay_cost(10, 20)

    assert payment.paid == 10
    assert payment.remaining == 0
    assert payment.multiplier == 0.5
    assert payment.weakened is True


def test_effectiveness_never_drops_below_floor() -> None:
    assert pay_cost(0, 20).multiplier == MIN_EFFECTIVENESS
    assert pay_cost(2, 20).multiplier == MIN_EFFECTIVENESS


def test_locked_resource_cannot_be_spent() -> None:
    payment = pay_cost(50, 20, available=5)

    assert payment.paid == 5
    assert payment.remaining == 45
    assert payment.multiplier == 0.25


def test_free_abilities_cost_nothing() -> None:
    payment = pay_cost(0, 0)

    assert payment.paid == 0
    assert payment.multiplier == 1.0

def test_import_skirmish_package() -> None:
    import importlib

    module = importlib.import_module("skirmish")
    assert module.__version__


def test_import_rng_no_side_effects() -> None:
    from skirmish.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)


def test_import_service_layer() -> None:
    from skirmish.services import CombatService
    from skirmish.services.controllers import CombatController

    assert CombatController(CombatService()) is not None

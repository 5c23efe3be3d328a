from .errors import EmptyPool


def pick(random_value: int, pool_size: int) -> int:
    """Index of the winning entry. Fairness rests on `random_value` alone."""
    if pool_size == 0:
        raise EmptyPool()
    return random_value % pool_size

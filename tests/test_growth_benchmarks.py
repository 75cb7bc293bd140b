from app.services.growth_benchmarks import NO_BENCHMARK, get_growth_benchmark


def test_younger_than_first_benchmark_uses_first_entry():
    assert get_growth_benchmark("tomato", 2).startswith("Seedling emerges")


def test_last_reached_benchmark_is_used():
    assert get_growth_benchmark("Tomato", 50).startswith("Flowering begins")
    assert get_growth_benchmark("tomato", 45).startswith("Flowering begins")


def test_lookup_is_case_insensitive():
    assert get_growth_benchmark("WHEAT", 75).startswith("Booting stage")


def test_older_than_last_benchmark_uses_last_entry():
    assert get_growth_benchmark("onion", 300).startswith("Tops begin to yellow")


def test_unknown_crop():
    assert get_growth_benchmark("dragonfruit", 30) == NO_BENCHMARK

from typing import Dict, List, Tuple

NO_BENCHMARK = "No specific benchmark data available for this crop."

# (day since planting, ideal state on that day), sorted by day
CROP_BENCHMARKS: Dict[str, List[Tuple[int, str]]] = {
    "tomato": [
        (7, "Seedling emerges with two cotyledons (seed leaves)."),
        (14, "First true leaves appear. Stem is thin but sturdy."),
        (21, "Plant has 3-5 true leaves and is about 4-6 inches tall."),
        (
            30,
            "Plant has 6-10 leaves, stem is thickening. May show first signs of tiny flower buds.",
        ),
        (45, "Flowering begins. Plant is bushy and about 1-1.5 feet tall."),
        (60, "Small green fruits (about 1cm) are visible. Active flowering continues."),
        (
            75,
            "Fruits are growing in size and number. First fruits may start to show a change"
            " in color (breaker stage).",
        ),
        (90, "Harvesting begins. Multiple clusters of ripe fruit are present."),
    ],
    "onion": [
        (10, "Germination and emergence of a single, grass-like leaf."),
        (25, "Plant has 2-3 true leaves. The base has not yet started to swell."),
        (
            45,
            "Plant has 5-6 leaves. The base of the plant begins to swell, indicating the"
            " start of bulb formation.",
        ),
        (70, "Bulb is noticeably larger. Leaf growth continues, adding layers to the bulb."),
        (100, "Tops are large and healthy. The bulb is near its final size but still firming up."),
        (
            120,
            "Tops begin to yellow and fall over, indicating maturity. The bulb is fully"
            " formed and ready for harvest.",
        ),
    ],
    "wheat": [
        (7, "Germination complete, single shoot emerges (coleoptile)."),
        (
            15,
            "Tillering begins. 2-3 leaves have unfolded, and secondary shoots (tillers)"
            " start to grow from the base.",
        ),
        (30, "Active tillering. The plant is bushy with multiple tillers."),
        (
            50,
            "Stem elongation (jointing) starts. The main stem begins to grow taller, and"
            " nodes are visible.",
        ),
        (70, "Booting stage. The head (spike) is enclosed in the sheath of the flag leaf."),
        (80, "Heading (flowering). The head has fully emerged from the flag leaf sheath."),
        (100, "Grain fill (milk stage). Grains are soft and contain a milky fluid."),
        (
            120,
            "Ripening. The plant turns golden yellow, and the grain hardens. Ready for harvest.",
        ),
    ],
}


def get_growth_benchmark(crop_type: str, days_since_planting: int) -> str:
    """
    Ideal state of the crop at its age: the last benchmark reached, or the
    first one when the crop is younger than every benchmark.
    """
    benchmarks = CROP_BENCHMARKS.get(crop_type.strip().lower())
    if not benchmarks:
        return NO_BENCHMARK

    description = benchmarks[0][1]
    for day, text in benchmarks:
        if days_since_planting < day:
            break
        description = text
    return description

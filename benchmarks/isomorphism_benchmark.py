"""
Isomorphism Benchmark

Times graph comparison on annotated RDF-Star workloads and on symmetric
blank node graphs that force the solver to branch.

Usage:
    python benchmarks/isomorphism_benchmark.py
    python benchmarks/isomorphism_benchmark.py --facts 5000 --cycles 20
    python benchmarks/isomorphism_benchmark.py --data-file data/sample/graph.nq
"""

import random
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rdf_isomorphic import (  # noqa: E402
    BlankNode,
    IsomorphismConfig,
    Literal,
    NamedNode,
    compare,
    parse_nquads,
    triple,
)
from rdf_isomorphic.terms import map_terms_nested  # noqa: E402


EX = "http://example.org/"
PROV = "http://www.w3.org/ns/prov#"


def generate_annotated_facts(num_facts: int, seed: int = 42):
    """Generate blank node facts annotated with RDF-Star quoted triples."""
    rng = random.Random(seed)

    sources = ["Wikipedia", "DBpedia", "Wikidata", "Manual"]
    predicates = [NamedNode(EX + p) for p in ("worksAt", "locatedIn", "memberOf", "relatedTo")]
    confidence = NamedNode(EX + "confidence")
    attributed = NamedNode(PROV + "wasAttributedTo")

    graph = []
    for i in range(num_facts):
        subject = BlankNode(f"e{rng.randint(0, num_facts // 4)}")
        obj = BlankNode(f"e{rng.randint(0, num_facts // 4)}")
        fact = triple(subject, rng.choice(predicates), obj)
        graph.append(fact)
        graph.append(triple(fact, confidence, Literal(str(round(rng.uniform(0.5, 1.0), 2)))))
        graph.append(triple(fact, attributed, Literal(rng.choice(sources))))
    return graph


def generate_cycles(num_cycles: int, length: int, prefix: str):
    """Disjoint directed blank node cycles, indistinguishable by refinement."""
    predicate = NamedNode(EX + "next")
    return [
        triple(
            BlankNode(f"{prefix}{c}_{i}"),
            predicate,
            BlankNode(f"{prefix}{c}_{(i + 1) % length}"),
        )
        for c in range(num_cycles)
        for i in range(length)
    ]


def relabel(graph, prefix: str, seed: int = 7):
    """Rename every blank node and shuffle the quads."""
    def rename(term):
        if isinstance(term, BlankNode):
            return BlankNode(prefix + term.value)
        return term

    renamed = [map_terms_nested(quad, rename) for quad in graph]
    random.Random(seed).shuffle(renamed)
    return renamed


def time_compare(name: str, graph_a, graph_b, config: IsomorphismConfig, iterations: int):
    """Compare two graphs repeatedly and report min/avg timings."""
    times = []
    result = None
    for _ in range(iterations):
        t0 = time.time()
        result = compare(graph_a, graph_b, config)
        times.append(time.time() - t0)

    entry = {
        "min": min(times) * 1000,
        "avg": sum(times) / len(times) * 1000,
        "status": result.status.value,
        "calls": result.stats.calls,
        "forced": result.stats.forced_pairs,
    }
    print(
        f"    {entry['min']:.2f}ms min, {entry['avg']:.2f}ms avg "
        f"({entry['status']}, {entry['calls']} calls, {entry['forced']} forced pairs)"
    )
    return name, entry


def run_isomorphism_benchmark(graph, num_cycles: int, iterations: int, hash_algorithm: str):
    """Run isomorphism benchmarks."""
    config = IsomorphismConfig(hash_algorithm=hash_algorithm)

    print("=" * 70)
    print("Isomorphism Benchmark")
    print("=" * 70)
    print(f"Hash primitive: {hash_algorithm}")
    print()

    results = {}

    print(f"Q1: Annotated facts vs. relabeled copy ({len(graph):,} quads)...")
    name, entry = time_compare("annotated_relabeled", graph, relabel(graph, "r"), config, iterations)
    results[name] = entry

    print("Q2: Annotated facts vs. copy with one literal changed...")
    changed = list(graph)
    for i, quad in enumerate(changed):
        if isinstance(quad.object, Literal):
            changed[i] = triple(quad.subject, quad.predicate, Literal(quad.object.value + "?"))
            break
    name, entry = time_compare("annotated_changed", graph, relabel(changed, "r"), config, iterations)
    results[name] = entry

    print(f"Q3: {num_cycles} triangles vs. shuffled triangles...")
    triangles = generate_cycles(num_cycles, 3, "t")
    name, entry = time_compare(
        "symmetric_triangles", triangles, relabel(triangles, "s"), config, iterations
    )
    results[name] = entry

    print("Q4: Hexagons vs. twice as many triangles...")
    hexagons = generate_cycles(max(num_cycles // 2, 1), 6, "h")
    doubled = generate_cycles(max(num_cycles // 2, 1) * 2, 3, "t")
    name, entry = time_compare("hexagons_vs_triangles", hexagons, doubled, config, iterations)
    results[name] = entry

    print()
    print("=" * 70)
    print("SUMMARY: Isomorphism Performance")
    print("=" * 70)
    print()
    print(f"{'Comparison':<35} {'Min (ms)':>12} {'Avg (ms)':>12} {'Status':>16}")
    print("-" * 78)
    for name, r in results.items():
        print(f"{name:<35} {r['min']:>12.2f} {r['avg']:>12.2f} {r['status']:>16}")

    return results


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Isomorphism Benchmark")
    parser.add_argument("--facts", type=int, default=2000, help="Number of annotated facts to generate")
    parser.add_argument("--cycles", type=int, default=10, help="Number of symmetric triangles")
    parser.add_argument("--iterations", type=int, default=5, help="Timed runs per comparison")
    parser.add_argument("--hash", type=str, default="sha1", help="Hash primitive (sha1, md5, blake2b)")
    parser.add_argument("--data-file", type=str, default=None, help="Use an N-Quads file instead of generating")
    args = parser.parse_args()

    if args.data_file:
        print(f"Loading {args.data_file}...")
        graph = parse_nquads(Path(args.data_file))
    else:
        graph = generate_annotated_facts(args.facts)

    run_isomorphism_benchmark(graph, args.cycles, args.iterations, args.hash)

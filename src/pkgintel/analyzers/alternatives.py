"""
Alternative package catalog.

Hand-curated substitution candidates, pros/cons and migration effort
estimates for common npm packages. This is static reference data: nothing
here is fetched or learned, and there is no way to extend it at runtime.
"""

from types import MappingProxyType

from pkgintel.core.models import (
    Alternative,
    MigrationEffort,
    PackageProfile,
    format_count,
)

# Maps package name to an ordered list of potential alternatives
KNOWN_ALTERNATIVES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    # Date/Time
    "moment": ("date-fns", "dayjs", "luxon"),
    "date-fns": ("dayjs", "luxon", "moment"),
    "dayjs": ("date-fns", "luxon", "moment"),

    # HTTP clients
    "axios": ("ky", "got", "node-fetch", "undici"),
    "node-fetch": ("undici", "axios", "ky", "got"),
    "got": ("axios", "ky", "undici"),
    "request": ("axios", "got", "node-fetch"),

    # State management
    "redux": ("zustand", "jotai", "recoil", "mobx", "valtio"),
    "mobx": ("zustand", "redux", "jotai", "valtio"),
    "zustand": ("jotai", "valtio", "redux"),

    # Validation
    "joi": ("zod", "yup", "valibot", "ajv"),
    "yup": ("zod", "joi", "valibot", "ajv"),
    "zod": ("valibot", "yup", "joi", "ajv"),

    # Testing
    "jest": ("vitest", "mocha", "ava"),
    "mocha": ("vitest", "jest", "ava"),
    "chai": ("vitest", "jest"),

    # Bundlers
    "webpack": ("vite", "esbuild", "rollup", "parcel"),
    "rollup": ("vite", "esbuild", "webpack"),
    "parcel": ("vite", "webpack", "esbuild"),

    # CSS frameworks
    "bootstrap": ("tailwindcss", "bulma", "foundation"),
    "tailwindcss": ("unocss", "bootstrap"),

    # ORM
    "sequelize": ("prisma", "drizzle-orm", "typeorm", "knex"),
    "typeorm": ("prisma", "drizzle-orm", "sequelize"),
    "prisma": ("drizzle-orm", "typeorm", "sequelize"),

    # Utility belts
    "lodash": ("radash", "remeda", "rambda"),
    "underscore": ("lodash", "radash"),

    # Web frameworks
    "express": ("fastify", "koa", "hono", "hapi"),
    "koa": ("fastify", "express", "hono"),
})

# Pairs with a near drop-in API; checked in both directions
LOW_EFFORT_PAIRS: tuple[tuple[str, str], ...] = (
    ("moment", "dayjs"),
    ("axios", "ky"),
    ("lodash", "radash"),
    ("jest", "vitest"),
)

# Pairs that need an architectural rewrite; checked in both directions
HIGH_EFFORT_PAIRS: tuple[tuple[str, str], ...] = (
    ("redux", "zustand"),
    ("webpack", "vite"),
    ("sequelize", "prisma"),
    ("express", "fastify"),
)

PROS_AND_CONS: MappingProxyType[str, tuple[tuple[str, ...], tuple[str, ...]]] = MappingProxyType({
    "date-fns": (
        ("Tree-shakeable", "Pure functions", "TypeScript native"),
        ("More verbose than dayjs", "No chainable API"),
    ),
    "dayjs": (
        ("Moment-compatible API", "Tiny size (2KB)", "Plugin system"),
        ("Mutable by default", "Fewer locales"),
    ),
    "zod": (
        ("TypeScript-first", "Great inference", "Active development"),
        ("Runtime overhead", "Bundle size"),
    ),
    "valibot": (
        ("Smallest bundle", "Modular design", "Fast"),
        ("Newer ecosystem", "Fewer utilities"),
    ),
    "vitest": (
        ("Vite-native", "ESM first", "Fast", "Jest compatible"),
        ("Newer than Jest", "Some Jest plugins incompatible"),
    ),
    "zustand": (
        ("Tiny (1KB)", "No boilerplate", "TypeScript native"),
        ("Less ecosystem than Redux", "Different patterns"),
    ),
    "prisma": (
        ("Type-safe queries", "Migrations", "Studio GUI"),
        ("Cold starts", "Query engine overhead"),
    ),
    "drizzle-orm": (
        ("SQL-like syntax", "No codegen", "Edge ready", "Lightweight"),
        ("Newer ecosystem", "Less documentation"),
    ),
    "vite": (
        ("Lightning fast HMR", "ESM native", "Simple config"),
        ("Different from Webpack patterns", "Some plugins incompatible"),
    ),
    "fastify": (
        ("High performance", "Schema validation", "Plugin system"),
        ("Different middleware pattern", "Learning curve from Express"),
    ),
})

DEFAULT_PROS_AND_CONS = (("Popular choice",), ("Evaluate fit for your use case",))


def get_known_alternatives(package_name: str) -> tuple[str, ...]:
    """Get the curated alternatives for a package (case-insensitive)."""
    return KNOWN_ALTERNATIVES.get(package_name.lower(), ())


def estimate_migration_effort(from_pkg: str, to_pkg: str) -> MigrationEffort:
    """Estimate effort to migrate between packages.

    Args:
        from_pkg: Original package name.
        to_pkg: Target package name.

    Returns:
        LOW or HIGH for curated pairs (either direction), MEDIUM otherwise.
    """
    pair = {from_pkg.lower(), to_pkg.lower()}
    if any(pair == set(p) for p in LOW_EFFORT_PAIRS):
        return MigrationEffort.LOW
    if any(pair == set(p) for p in HIGH_EFFORT_PAIRS):
        return MigrationEffort.HIGH
    return MigrationEffort.MEDIUM


def get_pros_and_cons(package_name: str) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Get curated (pros, cons), or a generic pair for uncurated packages."""
    return PROS_AND_CONS.get(package_name, DEFAULT_PROS_AND_CONS)


def build_alternative(
    original: str,
    candidate: str,
    profile: PackageProfile,
    weekly_downloads: int | None,
    github_stars: int | None,
) -> Alternative:
    """Combine fetched data with curated notes for one candidate."""
    pros, cons = get_pros_and_cons(candidate)
    return Alternative(
        name=candidate,
        description=profile.description,
        weekly_downloads=weekly_downloads,
        github_stars=github_stars,
        pros=pros,
        cons=cons,
        migration_effort=estimate_migration_effort(original, candidate),
    )


def recommend(original: str, alternatives: list[Alternative]) -> str:
    """Generate the recommendation for alternatives sorted by downloads.

    The most downloaded candidate is recommended unless a candidate with a
    strictly lower migration effort exists, in which case both are named.
    """
    if not alternatives:
        return (
            f'Could not fetch registry data for any curated alternative to "{original}". '
            "Try again later or search npm directly."
        )

    top = alternatives[0]
    easiest = min(alternatives, key=lambda a: a.migration_effort.rank)

    if easiest.migration_effort.rank < top.migration_effort.rank:
        return (
            f'"{top.name}" is most popular, but "{easiest.name}" offers '
            f'the easiest migration from "{original}".'
        )

    return f'Consider "{top.name}" - {format_count(top.weekly_downloads)} weekly downloads.'


"""
Curated package categories and demand trend classification.
"""

from types import MappingProxyType

from pkgintel.core.models import TrendDirection, TrendingPackage

CATEGORY_PACKAGES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "state-management": (
        "zustand", "jotai", "valtio", "redux", "@reduxjs/toolkit", "recoil", "mobx", "xstate",
    ),
    "testing": (
        "vitest", "jest", "@testing-library/react", "playwright", "cypress", "mocha", "ava",
    ),
    "ui-components": (
        "@radix-ui/react-dialog", "@headlessui/react", "@chakra-ui/react",
        "@mantine/core", "antd", "@mui/material", "shadcn-ui",
    ),
    "date-time": (
        "date-fns", "dayjs", "luxon", "moment", "tempo", "@internationalized/date",
    ),
    "validation": ("zod", "yup", "valibot", "ajv", "joi", "superstruct"),
    "http-client": ("axios", "ky", "got", "undici", "ofetch", "wretch"),
    "orm": ("prisma", "drizzle-orm", "typeorm", "sequelize", "knex", "kysely", "mikro-orm"),
    "bundler": ("vite", "esbuild", "rollup", "webpack", "parcel", "turbopack", "tsup"),
    "css-framework": (
        "tailwindcss", "unocss", "bootstrap", "bulma", "styled-components", "@emotion/react",
    ),
    "animation": (
        "framer-motion", "react-spring", "@react-spring/web", "gsap", "animejs", "motion",
    ),
})

# Name fragments identifying framework-specific packages. "node" has none.
FRAMEWORK_PREFIXES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "react": ("react-", "@react-", "use-"),
    "vue": ("vue-", "@vue/", "vueuse"),
    "svelte": ("svelte-", "@svelte/"),
    "node": (),
})

# A framework filter narrower than this falls back to the whole category
MIN_FILTERED = 3


def filter_by_framework(packages: tuple[str, ...], framework: str | None) -> tuple[str, ...]:
    """Narrow a category to packages naming the framework.

    Unknown frameworks, frameworks without prefixes and filters matching
    fewer than three packages all return the category unchanged.
    """
    prefixes = FRAMEWORK_PREFIXES.get(framework or "", ())
    if not prefixes:
        return packages

    matched = tuple(
        name for name in packages
        if any(p.lower() in name.lower() for p in prefixes)
    )
    if len(matched) < MIN_FILTERED:
        return packages
    return matched


def classify_trend(weekly: int, monthly: int | None) -> TrendDirection:
    """Compare last week's downloads with the weekly average of last month.

    Rising above 110% of monthly/4, declining below 90%; the boundaries
    themselves are stable. Integer arithmetic keeps them exact.
    """
    if monthly is None:
        return TrendDirection.STABLE
    if weekly * 40 > monthly * 11:
        return TrendDirection.RISING
    if weekly * 40 < monthly * 9:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def recommend(category: str, packages: list[TrendingPackage], rising: list[str]) -> str:
    if not packages:
        return f'Could not fetch registry data for any package in "{category}".'

    top = packages[0]
    text = f'"{top.name}" leads {category} with {top.weekly_downloads:,} weekly downloads.'
    if rising:
        text += " Rising: " + ", ".join(f'"{name}"' for name in rising) + "."
    return text

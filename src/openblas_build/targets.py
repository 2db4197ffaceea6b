"""Closed catalog of CPU targets understood by the OpenBLAS Makefile.

Identifiers follow ``TargetList.txt`` of OpenBLAS v0.3.10.
"""

from __future__ import annotations

from enum import StrEnum

from openblas_build.errors import ValidationError


class TargetFamily(StrEnum):
    X86_INTEL = "x86-intel"
    X86_AMD = "x86-amd"
    X86_GENERIC = "x86-generic"
    POWER = "power"
    MIPS = "mips"
    MIPS64 = "mips64"
    IA64 = "ia64"
    SPARC = "sparc"
    ARM = "arm"
    ARM64 = "arm64"
    ZARCH = "zarch"


class Target(StrEnum):
    """CPU microarchitecture passed to the build as ``TARGET=<token>``."""

    # X86/X86_64 Intel
    P2 = "P2"
    KATMAI = "KATMAI"
    COPPERMINE = "COPPERMINE"
    NORTHWOOD = "NORTHWOOD"
    PRESCOTT = "PRESCOTT"
    BANIAS = "BANIAS"
    YONAH = "YONAH"
    CORE2 = "CORE2"
    PENRYN = "PENRYN"
    DUNNINGTON = "DUNNINGTON"
    NEHALEM = "NEHALEM"
    SANDYBRIDGE = "SANDYBRIDGE"
    HASWELL = "HASWELL"
    SKYLAKEX = "SKYLAKEX"
    ATOM = "ATOM"

    # X86/X86_64 AMD
    ATHLON = "ATHLON"
    OPTERON = "OPTERON"
    OPTERON_SSE3 = "OPTERON_SSE3"
    BARCELONA = "BARCELONA"
    SHANGHAI = "SHANGHAI"
    ISTANBUL = "ISTANBUL"
    BOBCAT = "BOBCAT"
    BULLDOZER = "BULLDOZER"
    PILEDRIVER = "PILEDRIVER"
    STEAMROLLER = "STEAMROLLER"
    EXCAVATOR = "EXCAVATOR"
    ZEN = "ZEN"

    # X86/X86_64 generic
    SSE_GENERIC = "SSE_GENERIC"
    VIAC3 = "VIAC3"
    NANO = "NANO"

    # Power
    POWER4 = "POWER4"
    POWER5 = "POWER5"
    POWER6 = "POWER6"
    POWER7 = "POWER7"
    POWER8 = "POWER8"
    POWER9 = "POWER9"
    PPCG4 = "PPCG4"
    PPC970 = "PPC970"
    PPC970MP = "PPC970MP"
    PPC440 = "PPC440"
    PPC440FP2 = "PPC440FP2"
    CELL = "CELL"

    # MIPS
    P5600 = "P5600"
    MIPS1004K = "MIPS1004K"
    MIPS24K = "MIPS24K"

    # MIPS64
    SICORTEX = "SICORTEX"
    LOONGSON3A = "LOONGSON3A"
    LOONGSON3B = "LOONGSON3B"
    I6400 = "I6400"
    P6600 = "P6600"
    I6500 = "I6500"

    # IA64
    ITANIUM2 = "ITANIUM2"

    # Sparc
    SPARC = "SPARC"
    SPARCV7 = "SPARCV7"

    # ARM
    CORTEXA15 = "CORTEXA15"
    CORTEXA9 = "CORTEXA9"
    ARMV7 = "ARMV7"
    ARMV6 = "ARMV6"
    ARMV5 = "ARMV5"

    # ARM64
    ARMV8 = "ARMV8"
    CORTEXA53 = "CORTEXA53"
    CORTEXA57 = "CORTEXA57"
    CORTEXA72 = "CORTEXA72"
    CORTEXA73 = "CORTEXA73"
    NEOVERSEN1 = "NEOVERSEN1"
    EMAG8180 = "EMAG8180"
    FALKOR = "FALKOR"
    THUNDERX = "THUNDERX"
    THUNDERX2T99 = "THUNDERX2T99"
    TSV110 = "TSV110"

    # System Z
    ZARCH_GENERIC = "ZARCH_GENERIC"
    Z13 = "Z13"
    Z14 = "Z14"

    def token(self) -> str:
        return self.value

    @property
    def family(self) -> TargetFamily:
        return _FAMILY_MEMBERS[self]

    @classmethod
    def parse(cls, name: str) -> Target:
        """Look up a target by name, ignoring case and surrounding whitespace."""
        normalized = name.strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationError(
                f"Unknown OpenBLAS target: {name!r}",
                hint="Use one of the names listed in OpenBLAS TargetList.txt.",
                context={"operation": "parse_target", "target": name},
            ) from None


_FAMILIES: dict[TargetFamily, tuple[Target, ...]] = {
    TargetFamily.X86_INTEL: (
        Target.P2,
        Target.KATMAI,
        Target.COPPERMINE,
        Target.NORTHWOOD,
        Target.PRESCOTT,
        Target.BANIAS,
        Target.YONAH,
        Target.CORE2,
        Target.PENRYN,
        Target.DUNNINGTON,
        Target.NEHALEM,
        Target.SANDYBRIDGE,
        Target.HASWELL,
        Target.SKYLAKEX,
        Target.ATOM,
    ),
    TargetFamily.X86_AMD: (
        Target.ATHLON,
        Target.OPTERON,
        Target.OPTERON_SSE3,
        Target.BARCELONA,
        Target.SHANGHAI,
        Target.ISTANBUL,
        Target.BOBCAT,
        Target.BULLDOZER,
        Target.PILEDRIVER,
        Target.STEAMROLLER,
        Target.EXCAVATOR,
        Target.ZEN,
    ),
    TargetFamily.X86_GENERIC: (Target.SSE_GENERIC, Target.VIAC3, Target.NANO),
    TargetFamily.POWER: (
        Target.POWER4,
        Target.POWER5,
        Target.POWER6,
        Target.POWER7,
        Target.POWER8,
        Target.POWER9,
        Target.PPCG4,
        Target.PPC970,
        Target.PPC970MP,
        Target.PPC440,
        Target.PPC440FP2,
        Target.CELL,
    ),
    TargetFamily.MIPS: (Target.P5600, Target.MIPS1004K, Target.MIPS24K),
    TargetFamily.MIPS64: (
        Target.SICORTEX,
        Target.LOONGSON3A,
        Target.LOONGSON3B,
        Target.I6400,
        Target.P6600,
        Target.I6500,
    ),
    TargetFamily.IA64: (Target.ITANIUM2,),
    TargetFamily.SPARC: (Target.SPARC, Target.SPARCV7),
    TargetFamily.ARM: (
        Target.CORTEXA15,
        Target.CORTEXA9,
        Target.ARMV7,
        Target.ARMV6,
        Target.ARMV5,
    ),
    TargetFamily.ARM64: (
        Target.ARMV8,
        Target.CORTEXA53,
        Target.CORTEXA57,
        Target.CORTEXA72,
        Target.CORTEXA73,
        Target.NEOVERSEN1,
        Target.EMAG8180,
        Target.FALKOR,
        Target.THUNDERX,
        Target.THUNDERX2T99,
        Target.TSV110,
    ),
    TargetFamily.ZARCH: (Target.ZARCH_GENERIC, Target.Z13, Target.Z14),
}

_FAMILY_MEMBERS: dict[Target, TargetFamily] = {
    target: family for family, targets in _FAMILIES.items() for target in targets
}


def targets_in(family: TargetFamily) -> tuple[Target, ...]:
    return _FAMILIES[family]


__all__ = ["Target", "TargetFamily", "targets_in"]

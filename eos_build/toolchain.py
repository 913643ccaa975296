"""Kernel compiler and linker settings baked into every generated graph."""

from __future__ import annotations

from dataclasses import dataclass

from eos_build.models import BuildConfig, RuleDefinition, Rule, Variable

KERNEL_CFLAGS: tuple[str, ...] = (
    "-std=gnu99",
    "-O3",
    "-g",
    "-gdwarf-2",
    "-gstrict-dwarf",
    "-m64",
    "-mcmodel=kernel",
    "-mindirect-branch-register",
    "-mindirect-branch=thunk-extern",
    "-mno-mmx",
    "-mno-red-zone",
    "-mno-sse",
    "-msave-args",
    "-D__sun",
    "-D__SVR4",
    "-D_ASM_INLINES",
    "-D_DDI_STRICT",
    "-D_ELF64",
    "-D_KERNEL",
    "-D_MACHDEP",
    "-D_SYSCALL32",
    "-D_SYSCALL32_IMPL",
    "-Dlint",
    "-Dsun",
    "-U__i386",
    "-Ui386",
    "-Iusr/src/uts/intel",
    "-Iusr/src/uts/common",
    "-Iusr/src/common",
    "-Iusr/src/uts/i86pc",
    "-Iusr/src/uts/common/fs/zfs",
    "-ffreestanding",
    "-fno-inline-small-functions",
    "-fno-inline-functions-called-once",
    "-fno-ipa-cp",
    "-fno-ipa-icf",
    "-fno-clone-functions",
    "-fno-reorder-functions",
    "-fno-reorder-blocks-and-partition",
    "-fno-aggressive-loop-optimizations",
    "-fno-shrink-wrap",
    "-fno-asynchronous-unwind-tables",
    "-fstack-protector-strong",
    "-fdiagnostics-color=always",
    "--param=max-inline-insns-single=450",
)

KERNEL_LDFLAGS: tuple[str, ...] = ("-ztype=kmod",)


@dataclass(frozen=True)
class Toolchain:
    """Rules and variables shared by every build statement of a run."""
    compiler: str
    cflags: tuple[str, ...]
    ldflags: tuple[str, ...]
    variables: tuple[Variable, ...]
    rules: tuple[RuleDefinition, ...]
    genunix_path: str
    modules_dir: str

    @classmethod
    def from_config(cls, config: BuildConfig) -> Toolchain:
        genunix = str(config.genunix_path)
        release = config.release

        variables = (
            Variable("kernel_cflags", " ".join(KERNEL_CFLAGS)),
            Variable("kernel_ldflags", " ".join(KERNEL_LDFLAGS)),
        )
        rules = (
            RuleDefinition(
                Rule.MOD_COMPILE.value,
                " && ".join([
                    f"{config.compiler} $kernel_cflags -c $in -o $out",
                    f"ctfconvert -X -l '{release}' $out",
                    "strip $out",
                ]),
            ),
            RuleDefinition(
                Rule.MOD_LINK.value,
                " && ".join([
                    "ld $kernel_ldflags $mod_deps -o $out $in",
                    f"ctfmerge -l '{release}' -d {genunix} -o $out $in",
                ]),
            ),
            RuleDefinition(
                Rule.GENUNIX_LINK.value,
                " && ".join([
                    "ld $kernel_ldflags -o $out $in",
                    f"ctfmerge -l '{release}' -o $out $in",
                ]),
            ),
        )
        return cls(
            compiler=config.compiler,
            cflags=KERNEL_CFLAGS,
            ldflags=KERNEL_LDFLAGS,
            variables=variables,
            rules=rules,
            genunix_path=genunix,
            modules_dir=str(config.modules_dir),
        )

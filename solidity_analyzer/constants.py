"""Общие константы анализатора."""

# Расширение файла -> язык tree-sitter
LANGUAGE_MAP = {"sol": "solidity"}

DEFAULT_API_URL = "https://api.iard.solutions/v2/analyze"

# Каталог сторонних пакетов, который по умолчанию не сканируем
VENDOR_DIR = "node_modules"

# Префиксы импортов, обозначающих пакеты (а не файлы проекта)
PACKAGE_PREFIXES = ("@",)

# Пресеты правил solhint, которые можно игнорировать группой
STYLE_ONLY_RULES = (
    "quotes",
    "const-name-snakecase",
    "func-name-mixedcase",
    "contract-name-capwords",
    "var-name-mixedcase",
    "visibility-modifier-order",
    "imports-order",
)

NAMING_CONVENTION_RULES = (
    "const-name-snakecase",
    "contract-name-capwords",
    "event-name-capwords",
    "func-name-mixedcase",
    "func-param-name-mixedcase",
    "interface-starts-with-i",
    "modifier-name-mixedcase",
    "private-vars-leading-underscore",
    "var-name-mixedcase",
)

GAS_OPTIMIZATION_RULES = (
    "gas-calldata-parameters",
    "gas-custom-errors",
    "gas-increment-by-one",
    "gas-indexed-events",
    "gas-length-in-loops",
    "gas-multitoken1155",
    "gas-named-return-values",
    "gas-small-strings",
    "gas-strict-inequalities",
    "gas-struct-packing",
)

DOCUMENTATION_RULES = (
    "reason-string",
    "func-named-parameters",
    "named-parameters-mapping",
)

RULE_PRESETS: dict[str, tuple[str, ...]] = {
    "style-only": STYLE_ONLY_RULES,
    "naming-conventions": NAMING_CONVENTION_RULES,
    "gas-optimizations-advanced": GAS_OPTIMIZATION_RULES,
    "documentation-rules": DOCUMENTATION_RULES,
}

# Категории правил solhint (для вывода категории, если сервис её не прислал)
SECURITY_RULES = frozenset(
    {
        "avoid-call-value",
        "avoid-low-level-calls",
        "avoid-sha3",
        "avoid-suicide",
        "avoid-throw",
        "avoid-tx-origin",
        "check-send-result",
        "compiler-version",
        "func-visibility",
        "multiple-sends",
        "no-complex-fallback",
        "no-inline-assembly",
        "not-rely-on-block-hash",
        "not-rely-on-time",
        "reentrancy",
        "state-visibility",
    }
)

BEST_PRACTICE_RULES = frozenset(
    {
        "code-complexity",
        "constructor-syntax",
        "custom-errors",
        "explicit-types",
        "function-max-lines",
        "max-line-length",
        "max-states-count",
        "no-console",
        "no-empty-blocks",
        "no-global-import",
        "no-unused-import",
        "no-unused-vars",
        "one-contract-per-file",
        "payable-fallback",
        "reason-string",
    }
)

STYLE_GUIDE_RULES = frozenset(
    set(STYLE_ONLY_RULES)
    | set(NAMING_CONVENTION_RULES)
    | {"ordering", "immutable-vars-naming", "use-forbidden-name", "foundry-test-functions"}
)

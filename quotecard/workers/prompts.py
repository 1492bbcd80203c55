"""Prompt builders for quote and background generation.

Randomness comes from an injected ``rng`` (anything with ``choice``, e.g.
``random.Random``), so prompts are reproducible under a seed.
"""

import random
from typing import List, Optional, Sequence, Tuple

# Prompt text stays in the language the cards are written in (Romanian)
QUOTE_STYLES = [
    "jurământ mobilizator",
    "verdict moral tăios",
    "metaforă luminoasă",
    "îndemn scurt, imperativ",
    "binecuvântare/urare solemnă",
    "amintire istorică transformată în lecție",
    "declarație personală despre demnitate",
    "chemare la unitate și curaj",
    "exclamație de speranță",
    "sentință populară de tip proverb modern",
    "descriere poetică a familiei și rădăcinilor",
    "strigăt de libertate și dreptate",
    "mărturisire intimă de credință",
    "imaginație vizionară despre viitor",
    "elogiu adus eroilor și sacrificiului",
    "învățătură scurtă pentru tineri",
    "invocație către lumină și adevăr",
    "aforism despre muncă și demnitate",
    "memento al satului și tradiției",
    "binecuvântare pentru România",
]

BANNED_STARTS = [
    "România",
    "Fără",
    "Credința",
    "Adevărul",
    "Lumina",
    "Jur",
    "Cât timp",
    "Trebuie",
    "Întotdeauna",
    "Să fim",
    "Noi",
]

RECENT_QUOTES_IN_PROMPT = 8

QUOTE_SYSTEM_PROMPT = (
    "You craft concise, original inspirational quotes in English. "
    "Themes to draw from: faith, truth, light, family, dignity, hope, history, "
    "unity, sacrifice, work, freedom, justice, honor, education, future, "
    "roots, traditions, heritage, heroism, courage, solidarity, wisdom, resilience, gratitude. "
    "Alternate styles: solemn oath, moral verdict, poetic metaphor, rallying call, short blessing, historical lesson. "
    "Keep each quote under 180 characters, in 1–2 short sentences. "
    "Avoid clichés, vary the structure and opening, no quotation marks or attributions."
)

# (name, colors)
IMAGE_PALETTES: List[Tuple[str, List[str]]] = [
    ("lumina", ["#F8F5E7", "#EDE7D1", "#C9C2A3", "#8F8A70"]),
    ("tricolor discret", ["#1C2E5A", "#B91D23", "#E7D9AC", "#0E1A33"]),
    ("lemn și filigran", ["#3E2C1C", "#A67C52", "#D9C7A4", "#F2E9DA"]),
    ("piatră și aur", ["#2C2C2C", "#6B6B6B", "#BCA46A", "#F1E7C8"]),
    ("albastru de Voroneț", ["#1C3A5E", "#3F6C9D", "#D7D3C8", "#A08E6A"]),
]

IMAGE_MOTIFS = [
    "ray of light piercing through mist",
    "silhouettes of mountains at sunrise",
    "parchment texture with subtle decorative filigree",
    "cross suggested only by intersection of light rays",
    "traditional textiles rendered abstractly",
    "old stone with patina, obliquely illuminated",
    "stylized oak branches",
    "outlines of wooden churches, almost ghostly",
]

IMAGE_STYLES = [
    "minimalist, clean, emphasis on light",
    "painterly realism, atmospheric depth",
    "modern illustration with natural textures",
    "conceptual photography with subtle bokeh",
    "modern engraving with clean contrasts",
    "fine-art, calm composition",
]

IMAGE_BASE_LINE = "Background image only, no text, no watermark."
IMAGE_THEME_LINE = "Theme: credință, adevăr, lumină, România, familie, demnitate, speranță, istorie."


def pick_two(items: Sequence[str], rng) -> Tuple[str, str]:
    """Pick two distinct items (requires at least two distinct values)."""
    first = rng.choice(items)
    second = rng.choice(items)
    while second == first:
        second = rng.choice(items)
    return first, second


def build_quote_prompt(previous_quotes: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """Build the user prompt for one generated quote.

    Args:
        previous_quotes: Texts of earlier quotes, in history order; the last
            eight are listed so the model avoids repeating them
        rng: Random source for the style pick

    Returns:
        Newline-joined prompt
    """
    rng = rng or random.Random()
    style = rng.choice(QUOTE_STYLES)
    recent = "\n".join(
        f"{i + 1}. {quote}"
        for i, quote in enumerate(list(previous_quotes)[-RECENT_QUOTES_IN_PROMPT:])
    )

    lines = [
        "Scrie UN singur citat original, în limba română, fără ghilimele și fără atribuire.",
        "Lungime: maxim 180 de caractere, 1–2 fraze.",
        "Teme obligatorii (alege liber combinații): credință, adevăr, lumină, România, familie, demnitate, speranță, istorie.",
        f"Variază STRUCTURA și ÎNCEPUTUL. Stilul pentru această generație: {style}.",
        f"NU începe cu: {', '.join(BANNED_STARTS)}.",
        (
            "Evită să semene cu aceste citate recente (nu repeta structură, ritm, început sau imagini):\n"
            f"{recent}"
        ) if recent else "",
        "Evită clișeele evidente și frazele lungi. Fără enumerări banale.",
    ]
    return "\n".join(line for line in lines if line)


def build_quote_messages(previous_quotes: Sequence[str], rng: Optional[random.Random] = None) -> List[dict]:
    """System and user messages for a quote chat completion."""
    return [
        {"role": "system", "content": QUOTE_SYSTEM_PROMPT},
        {"role": "user", "content": build_quote_prompt(previous_quotes, rng)},
    ]


def build_image_prompt(seed_quote: str = "", rng: Optional[random.Random] = None) -> str:
    """Build the prompt for a background image.

    With a seed quote the prompt only asks for a text-free image inspired by
    the quote. Without one it adds a theme, a composition (style plus two
    distinct motifs) and a color palette.
    """
    rng = rng or random.Random()
    palette_name, palette_colors = rng.choice(IMAGE_PALETTES)
    motif1, motif2 = pick_two(IMAGE_MOTIFS, rng)
    style = rng.choice(IMAGE_STYLES)
    seed = (seed_quote or "").strip()

    if seed:
        lines = [
            IMAGE_BASE_LINE,
            f'Inspiră-te vizual din mesajul: "{seed}".',
        ]
    else:
        lines = [
            IMAGE_BASE_LINE,
            IMAGE_THEME_LINE,
            f"Composition: {style}; {motif1}; {motif2}; spațiu negativ pentru tipografie.",
            f"Color palette: {palette_name} ({', '.join(palette_colors)}).",
        ]
    return " ".join(line for line in lines if line.strip())

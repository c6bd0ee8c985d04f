"""
Static brand registry for the Japan market.

Instruction templates are data: each maps (page_text, url) to the prompt sent
to the extraction model, so the pipeline never branches on brand.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.scraping.config.models import BrandConfig, InstructionTemplate

_RESPONSE_CONTRACT = """\
IMPORTANT: TRANSLATE ALL EXTRACTED TEXT (name, info, category) INTO ENGLISH.
Use one of these category keys when it fits: family, dining, rewards, business, travel, spa, wedding, general, partnership, seasonal.
Respond ONLY with a JSON array: [{"name": "...", "info": "...", "category": "...", "isBanner": boolean}]"""


def _template(*, title: str, task: str, banner_rule: str) -> InstructionTemplate:
    def build(page_text: str, url: str) -> str:
        return (
            f"GCM INTEL EXTRACTION: {title}\n"
            f"URL: {url}\n"
            f"STREAM: {page_text}\n"
            f"TASK: {task}\n"
            f"IMPORTANT: {banner_rule}\n"
            f"{_RESPONSE_CONTRACT}"
        )

    return build


_HERO_SLIDE = 'If it\'s a primary visual slide/hero banner, set "isBanner": true.'
_HERO_VISUAL = 'If it\'s a primary visual/hero banner, set "isBanner": true.'

DEFAULT_BRANDS: tuple[BrandConfig, ...] = (
    BrandConfig(
        key="marriott",
        name="Marriott",
        source_url="https://www.marriott.com/ja/offers.mi",
        instruction=_template(
            title="Marriott Japan Offers",
            task=(
                "Identify and extract all current marketing campaigns and HIGH-IMPACT HERO BANNERS. "
                "PRIORITY TARGETS: Look for seasonal Japan themes, Member Exclusives, and Flagship promotions."
            ),
            banner_rule=_HERO_SLIDE,
        ),
    ),
    BrandConfig(
        key="ihg",
        name="IHG",
        source_url="https://www.ihg.com/content/jp/ja/offers",
        instruction=_template(
            title="IHG Japan Offers",
            task="Deep scan for high-impact Visual Hero Banners and Promotional Seasonal Campaigns in Japan.",
            banner_rule=_HERO_SLIDE,
        ),
    ),
    BrandConfig(
        key="hyatt",
        name="Hyatt",
        source_url="https://www.hyatt.com/loyalty/ja-JP",
        instruction=_template(
            title="Hyatt Japan Loyalty",
            task=(
                "Extract active promotional offers and limited time member deals for Japan. "
                'SPECIFIC PRIORITY: Identify high-impact Hero Banners like "TO A NEW ADVENTURE" and '
                "point-earning promotions (e.g., 5 Base Points, free nights from 3,500 points)."
            ),
            banner_rule='If it\'s a primary visual/hero banner or main promotion, set "isBanner": true.',
        ),
    ),
    BrandConfig(
        key="accor",
        name="Accor",
        source_url="https://all.accor.com/a/ja/deals-corner.html",
        instruction=_template(
            title="Accor ALL Japan Deals Corner",
            task="Identify tactical promotions, seasonal offers, and ALL member exclusives in the Japan market.",
            banner_rule=_HERO_VISUAL,
        ),
    ),
    BrandConfig(
        key="hilton",
        name="Hilton",
        source_url="https://www.hilton.com/ja/",
        instruction=_template(
            title="Hilton Japan Regional",
            task=(
                "Extract active promotional assets and marketing messaging for Hilton's Japan presence. "
                'SPECIFIC TARGETS: Look for "Points Unlimited", Hilton Honors member deals, '
                "and seasonal Japan vacation offers."
            ),
            banner_rule=_HERO_SLIDE,
        ),
    ),
)


def select_brands(
    brand_keys: Sequence[str] | None = None,
    *,
    brands: Sequence[BrandConfig] = DEFAULT_BRANDS,
) -> list[BrandConfig]:
    """
    Return brands in run order.

    With no keys every configured brand runs in registry order; otherwise the
    order of `brand_keys` wins. Unknown keys raise ValueError.
    """

    if not brand_keys:
        return list(brands)

    by_key = {brand.key: brand for brand in brands}
    selected: list[BrandConfig] = []
    for raw_key in brand_keys:
        key = raw_key.strip().lower()
        if not key:
            continue
        brand = by_key.get(key)
        if brand is None:
            allowed = ", ".join(sorted(by_key))
            raise ValueError(f"Unknown brand key '{raw_key}'. Allowed keys: {allowed}.")
        if brand not in selected:
            selected.append(brand)
    return selected

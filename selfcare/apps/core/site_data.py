"""Static marketing content: navigation and the About page."""

from __future__ import annotations

from dataclasses import dataclass, field

BOOKING_URL = "https://www.massagebook.com/therapists/kc-fairway-bodywork?src=external"


@dataclass(frozen=True)
class NavItem:
    """A header navigation link. ``featured`` items render as a button."""

    href: str
    text: str
    featured: bool = False

    @property
    def is_external(self) -> bool:
        return self.href.startswith(("http://", "https://"))


@dataclass(frozen=True)
class Value:
    title: str
    description: str


@dataclass(frozen=True)
class AboutData:
    title: str
    about_text: str
    mission: str
    vision: str
    values: tuple[Value, ...] = field(default_factory=tuple)


NAV_ITEMS: tuple[NavItem, ...] = (
    NavItem(href="/about/", text="About"),
    NavItem(href="/blog/", text="Blog"),
    NavItem(href=BOOKING_URL, text="Book Now", featured=True),
)

ABOUT = AboutData(
    title="About Sincerely, Selfcare",
    about_text=(
        "My name is Anthony Snell, and I created Sincerely, Selfcare with one mission: "
        "to help people feel better in their bodies. I specialize in therapeutic massage "
        "with a focus on recovery, pain relief, and improving mobility. From athletes to "
        "anyone managing tension, injuries, or chronic discomfort, I use techniques like "
        "neuromuscular therapy, trigger point work, cupping, heated scraper, and adhesion "
        "release to create meaningful, lasting results."
    ),
    mission=(
        "To help people feel better in their bodies through massage that focuses on "
        "recovery, mobility, and lasting results."
    ),
    vision=(
        "To be a leader in the massage industry by providing exceptional service and results."
    ),
    values=(
        Value(
            title="Client-Centered Care",
            description=(
                "Every session is tailored to your unique needs, with the goal of helping "
                "you feel real, lasting improvement."
            ),
        ),
        Value(
            title="Therapeutic Excellence",
            description=(
                "Neuromuscular therapy, trigger point work, cupping, and adhesion release "
                "for results that go beyond temporary relief."
            ),
        ),
        Value(
            title="Integrity & Professionalism",
            description=(
                "Respect, trust, and clear communication, so every client feels safe and "
                "supported."
            ),
        ),
        Value(
            title="Commitment to Growth",
            description=(
                "Continually learning and refining skills to bring the highest quality of "
                "therapeutic massage to every client."
            ),
        ),
    ),
)

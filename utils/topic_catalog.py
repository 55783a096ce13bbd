"""
Discussion topic catalog and topic-keyed reading recommendations.

Lookup order for a free-form topic string (case-insensitive):
  1. Keyword routes (e.g. "mental health", "school" + "curriculum"/"education")
  2. Catalog topics: by id (hyphens read as spaces, containment either way) or exact title
  3. General recommendations
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class Topic:
    id: str
    title: str
    description: str
    category: str
    difficulty: str  # beginner | intermediate | advanced
    keywords: Tuple[str, ...]
    estimated_duration: int  # minutes
    objectives: Tuple[str, ...]


TOPICS: Tuple[Topic, ...] = (
    Topic(
        "social-media-impact", "Impact of Social Media on Society",
        "Discuss the positive and negative effects of social media on modern society, relationships, and communication.",
        "Technology & Society", "beginner",
        ("social media", "communication", "relationships", "privacy", "mental health"), 20,
        ("Analyze social media effects", "Consider multiple perspectives", "Discuss solutions"),
    ),
    Topic(
        "remote-work-future", "The Future of Remote Work",
        "Explore the long-term implications of remote work on businesses, employees, and society.",
        "Business & Work", "intermediate",
        ("remote work", "productivity", "work-life balance", "collaboration", "technology"), 25,
        ("Evaluate remote work benefits", "Address challenges", "Predict future trends"),
    ),
    Topic(
        "ai-ethics", "Ethics in Artificial Intelligence",
        "Discuss the ethical implications of AI development, including bias, privacy, and job displacement.",
        "Technology & Ethics", "advanced",
        ("AI ethics", "bias", "privacy", "automation", "responsibility"), 30,
        ("Examine ethical dilemmas", "Propose solutions", "Consider stakeholder perspectives"),
    ),
    Topic(
        "sustainable-development", "Sustainable Development Goals",
        "Analyze progress toward UN Sustainable Development Goals and discuss implementation strategies.",
        "Environment & Policy", "intermediate",
        ("sustainability", "development", "environment", "policy", "global goals"), 25,
        ("Assess current progress", "Identify barriers", "Develop action plans"),
    ),
    Topic(
        "education-technology", "Technology in Education",
        "Examine the role of technology in modern education and its impact on learning outcomes.",
        "Education & Technology", "beginner",
        ("education", "technology", "learning", "digital divide", "online learning"), 20,
        ("Evaluate educational technology", "Consider accessibility", "Discuss best practices"),
    ),
    Topic(
        "healthcare-innovation", "Innovation in Healthcare",
        "Discuss emerging healthcare technologies and their potential to transform patient care.",
        "Healthcare & Innovation", "advanced",
        ("healthcare", "innovation", "patient care", "medical technology", "telemedicine"), 30,
        ("Explore new technologies", "Assess implementation challenges", "Consider patient impact"),
    ),
)

# A route matches when every group has at least one term contained in the topic text
KEYWORD_ROUTES: Tuple[Tuple[Tuple[Tuple[str, ...], ...], Tuple[str, ...]], ...] = (
    ((("mental health",),), (
        "Read WHO and UNESCO briefs on school-based mental health programs",
        'Review "School Mental Health: A Framework for Promotion, Prevention, and Intervention" (Springer)',
        "Study research on curriculum-integrated mental health literacy by Dr. Stan Kutcher",
        "Read systematic reviews on SEL (Social and Emotional Learning) outcomes (CASEL)",
        'Explore "Mental Health in Schools" articles in The Lancet Child & Adolescent Health',
    )),
    ((("school",), ("curriculum", "education")), (
        "Study OECD reports on education innovation and curriculum reform",
        "Read UNESCO guidance on competency-based curricula and digital literacy",
        "Review meta-analyses on curriculum design effectiveness (Review of Educational Research)",
    )),
    ((("ai",), ("ethic",)), (
        "Read \"Weapons of Math Destruction\" by Cathy O'Neil for AI bias foundations",
        "Study the IEEE Ethically Aligned Design guidelines",
        "Review the EU AI Act overview and NIST AI Risk Management Framework",
    )),
    ((("remote work", "hybrid work"),), (
        'Read "Remote Work Revolution" by Tsedal Neeley',
        "Study McKinsey Global Institute reports on hybrid work productivity",
        "Review HBR articles on asynchronous collaboration best practices",
    )),
    ((("sustainable", "sdg", "climate"),), (
        "Study the UN Sustainable Development Goals (SDGs) primary documentation",
        'Read "Planetary Boundaries" research (Stockholm Resilience Centre)',
        "Review IPCC synthesis reports for latest climate evidence",
    )),
)

TOPIC_RECOMMENDATIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "social-media-impact": (
        'Read research papers on "Social Media and Mental Health" by Royal Society for Public Health',
        'Study "The Social Media Effect" by Dr. Jean Twenge for deeper insights',
        'Review articles on "Digital Wellbeing and Social Media Usage Patterns"',
    ),
    "remote-work-future": (
        'Read "Remote Work Revolution" by Tsedal Neeley for comprehensive understanding',
        'Study "The Future of Work" research by McKinsey Global Institute',
        'Review articles on "Hybrid Work Models and Productivity" in Harvard Business Review',
    ),
    "ai-ethics": (
        "Read \"Weapons of Math Destruction\" by Cathy O'Neil for AI bias understanding",
        'Study "AI Ethics Guidelines" by IEEE Standards Association',
        'Review "Artificial Intelligence and Ethics" research papers from MIT',
    ),
    "sustainable-development": (
        'Read "Doughnut Economics" by Kate Raworth for sustainable development concepts',
        "Study UN Sustainable Development Goals official documentation",
        'Review "Planetary Boundaries" research by Stockholm Resilience Centre',
    ),
    "education-technology": (
        'Read "The Digital Divide" research by Pew Research Center',
        'Study "Educational Technology Trends" by EDUCAUSE',
        'Review "Online Learning Effectiveness" studies from Stanford University',
    ),
    "healthcare-innovation": (
        'Read "The Digital Doctor" by Robert Wachter for healthcare technology insights',
        'Study "Telemedicine and Healthcare Delivery" research from Mayo Clinic',
        'Review "AI in Healthcare" articles from Nature Medicine journal',
    ),
})

GENERAL_RECOMMENDATIONS: Tuple[str, ...] = (
    "Read widely on the discussion topic to build knowledge base",
    "Study relevant research papers and articles in the field",
    "Follow industry experts and thought leaders on the topic",
)


def get_topic(topic_id: str) -> Optional[Topic]:
    return next((t for t in TOPICS if t.id == topic_id), None)


def _route_matches(text: str, groups) -> bool:
    return all(any(term in text for term in group) for group in groups)


def match_topic_id(topic: Optional[str]) -> Optional[str]:
    """Catalog id for a topic string, or None. Empty topics never match."""
    t = (topic or "").strip().lower()
    if not t:
        return None
    t_spaced = t.replace("-", " ")
    for key in TOPIC_RECOMMENDATIONS:
        spaced = key.replace("-", " ")
        if spaced in t_spaced or t_spaced in spaced:
            return key
    for entry in TOPICS:
        if entry.title.lower() == t:
            return entry.id
    return None


def recommendations_for_topic(topic: Optional[str]) -> Tuple[str, ...]:
    """Curated reading list for a topic (keyword routes, then catalog, then general)."""
    t = (topic or "").lower()
    if t.strip():
        for groups, recommendations in KEYWORD_ROUTES:
            if _route_matches(t, groups):
                return recommendations
    key = match_topic_id(topic)
    if key is not None:
        return TOPIC_RECOMMENDATIONS[key]
    return GENERAL_RECOMMENDATIONS

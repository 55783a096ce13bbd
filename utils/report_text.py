"""
Fixed narrative and recommendation text for performance reports.

All copy lives here as immutable tables so the aggregation logic in
report_aggregator.py can be read and tested independently of the wording.
Keys are ScoreVector field names.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple

CORE_METRICS: Tuple[str, ...] = ("confidence", "fluency", "originality", "teamwork", "reasoning")


class AnalysisText(NamedTuple):
    feedback: str
    examples: Tuple[str, ...]
    improvements: Tuple[str, ...]


# ----------------------------------------------------------------------------
# Strengths (field >= 75) and weaknesses (field < 65), in declaration order
# ----------------------------------------------------------------------------
STRENGTH_TEXT: Mapping[str, str] = MappingProxyType({
    "confidence": "Strong confidence in communication and idea presentation",
    "fluency": "Excellent verbal fluency and articulation skills",
    "originality": "Creative thinking and original perspective contribution",
    "teamwork": "Effective collaboration and team-oriented approach",
    "reasoning": "Logical reasoning and evidence-based argumentation",
    "participation": "Active participation and engagement in discussion",
})
GENERIC_STRENGTH = "Shows potential for growth in all areas"

WEAKNESS_TEXT: Mapping[str, str] = MappingProxyType({
    "confidence": "Communication confidence could be improved",
    "fluency": "Verbal fluency and speech delivery need development",
    "originality": "More creative and original thinking would enhance contributions",
    "teamwork": "Team collaboration skills require strengthening",
    "reasoning": "Logical reasoning and argument structure need improvement",
    "participation": "Contributions to the discussion were infrequent",
})
FILLER_WEAKNESS = "Frequent use of filler words affects communication clarity"
NO_PARTICIPATION_WEAKNESS = "No participation in the group discussion"

# ----------------------------------------------------------------------------
# Non-participation
# ----------------------------------------------------------------------------
NON_PARTICIPATION_IMPROVEMENTS: Tuple[str, ...] = (
    "The user could have spoken in the group discussion to demonstrate their communication skills",
    "Practice speaking up in group settings to build confidence",
    "Prepare talking points in advance to feel more comfortable contributing",
    "Start with small contributions and gradually increase participation",
    "Focus on active listening and building on others' ideas",
)

NON_PARTICIPATION_ANALYSIS: Mapping[str, AnalysisText] = MappingProxyType({
    "confidence": AnalysisText(
        "No participation detected in the discussion. Confidence cannot be assessed without verbal contribution.",
        ("No verbal contributions", "No voice projection", "No assertive communication"),
        ("Practice speaking in group settings", "Prepare key points before discussions", "Start with small contributions"),
    ),
    "fluency": AnalysisText(
        "Speech fluency cannot be evaluated without verbal participation in the discussion.",
        ("No speech delivery", "No verbal communication", "No articulation demonstrated"),
        ("Practice speaking aloud daily", "Record yourself speaking", "Join speaking clubs or groups"),
    ),
    "originality": AnalysisText(
        "Original thinking cannot be assessed without contribution of ideas or perspectives.",
        ("No unique perspectives shared", "No creative contributions", "No original ideas presented"),
        ("Read widely on various topics", "Practice brainstorming techniques", "Develop unique viewpoints"),
    ),
    "teamwork": AnalysisText(
        "Teamwork skills cannot be evaluated without active participation and collaboration.",
        ("No collaboration demonstrated", "No team interaction", "No facilitation of others"),
        ("Practice active listening", "Focus on building on others' ideas", "Work on inclusive communication"),
    ),
    "reasoning": AnalysisText(
        "Logical reasoning cannot be assessed without presenting arguments or structured thoughts.",
        ("No arguments presented", "No logical structure demonstrated", "No evidence-based thinking shown"),
        ("Practice structured argumentation", "Research topics thoroughly", "Learn logical reasoning techniques"),
    ),
})

# ----------------------------------------------------------------------------
# Detailed analysis bands: excellent (>= 85), good (>= 70), developing (< 70)
# Fluency feedback is a template over {wpm} and {fillers}.
# ----------------------------------------------------------------------------
BAND_EXCELLENT = "excellent"
BAND_GOOD = "good"
BAND_DEVELOPING = "developing"

ANALYSIS_BANDS: Mapping[str, Mapping[str, AnalysisText]] = MappingProxyType({
    "confidence": MappingProxyType({
        BAND_EXCELLENT: AnalysisText(
            "Excellent confidence levels throughout the discussion. You demonstrated strong self-assurance and conviction in your ideas.",
            ("Clear voice projection", "Assertive body language", "Willingness to take initiative"),
            ("Maintain this confidence while remaining open to feedback", "Help encourage others to participate"),
        ),
        BAND_GOOD: AnalysisText(
            "Good confidence levels with room for further development. You showed comfortable participation with occasional hesitation.",
            ("Generally clear communication", "Participated actively", "Some hesitation in challenging topics"),
            ("Practice speaking on controversial topics", "Work on maintaining composure under pressure"),
        ),
        BAND_DEVELOPING: AnalysisText(
            "Confidence levels could be improved. Consider building your self-assurance through practice and preparation.",
            ("Frequent hesitation", "Soft voice projection", "Tendency to defer to others"),
            (
                'Watch "How to Build Confidence" by TED-Ed on YouTube for practical techniques',
                'Follow "Charisma on Command" YouTube channel for communication confidence tips',
                'Practice with "Toastmasters International" speaking exercises available on YouTube',
                "Join local speaking clubs or practice groups to build real-world confidence",
            ),
        ),
    }),
    "fluency": MappingProxyType({
        BAND_EXCELLENT: AnalysisText(
            "Excellent fluency with {wpm} words per minute and minimal filler words. Your speech flow was natural and engaging.",
            ("Smooth transitions between ideas", "Natural speech rhythm", "Minimal use of filler words"),
            ("Maintain this excellent pace", "Consider varying speech rhythm for emphasis"),
        ),
        BAND_GOOD: AnalysisText(
            "Good fluency with some areas for improvement. Speech rate of {wpm} wpm is reasonable with {fillers} filler words noted.",
            ("Generally smooth delivery", "Occasional pauses for thought", "Some filler word usage"),
            ("Practice eliminating filler words", "Work on smoother transitions"),
        ),
        BAND_DEVELOPING: AnalysisText(
            "Fluency needs development. Focus on improving speech flow and reducing the {fillers} filler words observed.",
            ("Frequent pauses", "Many filler words", "Disrupted speech flow"),
            (
                'Watch "How to Speak More Clearly" by Voice Coach on YouTube',
                "Follow \"Rachel's English\" YouTube channel for pronunciation and fluency exercises",
                'Practice with "English Speaking Practice" videos by English Addict with Mr Steve',
                'Use "Shadowing Technique" tutorials available on YouTube for speech rhythm improvement',
                "Practice reading aloud daily with news articles or books to improve flow",
            ),
        ),
    }),
    "originality": MappingProxyType({
        BAND_EXCELLENT: AnalysisText(
            "Outstanding original thinking and creative contributions. You brought unique perspectives that enhanced the discussion.",
            ("Novel insights and connections", "Creative problem-solving approaches", "Unique examples and analogies"),
            ("Continue developing creative thinking", "Share your creative process with others"),
        ),
        BAND_GOOD: AnalysisText(
            "Good original thinking with some creative contributions. You showed ability to think beyond conventional approaches.",
            ("Some unique perspectives", "Occasional creative insights", "Building on others' ideas creatively"),
            ("Read diverse sources for inspiration", "Practice brainstorming techniques"),
        ),
        BAND_DEVELOPING: AnalysisText(
            "Originality could be enhanced. Focus on developing more creative and unique perspectives on topics.",
            ("Conventional thinking patterns", "Limited unique contributions", "Tendency to agree without adding value"),
            (
                'Watch "Creative Thinking Techniques" by TED-Ed on YouTube',
                'Study "How to Think Outside the Box" by MindTools on YouTube',
                'Follow "Brainstorming Methods" tutorials by business coaches on YouTube',
                'Watch "Lateral Thinking" videos by Edward de Bono on YouTube',
                "Explore topics from multiple angles and practice devil's advocate approach",
            ),
        ),
    }),
    "teamwork": MappingProxyType({
        BAND_EXCELLENT: AnalysisText(
            "Excellent teamwork and collaboration skills. You effectively built on others' ideas and facilitated inclusive discussion.",
            ("Active listening demonstrated", "Built on others' contributions", "Encouraged participation from all members"),
            ("Continue modeling excellent teamwork", "Consider taking on leadership roles"),
        ),
        BAND_GOOD: AnalysisText(
            "Good teamwork skills with room for improvement. You collaborated well but could enhance your facilitation of others.",
            ("Generally collaborative approach", "Some building on others' ideas", "Respectful interaction style"),
            ("Practice more active listening", "Focus on encouraging quieter participants"),
        ),
        BAND_DEVELOPING: AnalysisText(
            "Teamwork skills need development. Focus on more collaborative and inclusive interaction with team members.",
            ("Limited building on others' ideas", "Tendency to focus on own contributions", "Missed collaboration opportunities"),
            (
                'Watch "How to Be a Better Team Player" by Harvard Business Review on YouTube',
                'Study "Active Listening Skills" by Communication Coach on YouTube',
                'Follow "Collaboration Techniques" by business leadership channels on YouTube',
                'Watch "How to Facilitate Group Discussions" by facilitation experts on YouTube',
                "Practice active listening techniques and focus on asking questions about others' ideas",
            ),
        ),
    }),
    "reasoning": MappingProxyType({
        BAND_EXCELLENT: AnalysisText(
            "Excellent logical reasoning and argumentation. Your points were well-structured and supported with clear evidence.",
            ("Clear logical flow", "Evidence-based arguments", "Addressed counterarguments effectively"),
            ("Continue developing complex reasoning skills", "Help others structure their arguments"),
        ),
        BAND_GOOD: AnalysisText(
            "Good reasoning abilities with some well-structured arguments. Continue developing logical flow and evidence support.",
            ("Generally logical arguments", "Some evidence provided", "Clear main points"),
            ("Strengthen evidence gathering", "Practice addressing counterarguments"),
        ),
        BAND_DEVELOPING: AnalysisText(
            "Reasoning skills need development. Focus on creating more structured arguments with better evidence support.",
            ("Weak argument structure", "Limited evidence provided", "Difficulty addressing opposing views"),
            (
                'Watch "Critical Thinking Skills" by TED-Ed on YouTube',
                'Study "Logical Fallacies" by Crash Course Philosophy on YouTube',
                'Follow "Argument Structure" tutorials by academic writing channels on YouTube',
                'Watch "How to Build Strong Arguments" by debate coaches on YouTube',
                "Practice structured argumentation and research topics thoroughly",
            ),
        ),
    }),
})

# ----------------------------------------------------------------------------
# Per-metric recommendation lists, in the order they are appended
# ----------------------------------------------------------------------------
METRIC_RECOMMENDATIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "confidence": (
        'Watch "How to Build Confidence" by TED-Ed on YouTube for practical confidence-building techniques',
        'Follow "Charisma on Command" YouTube channel for communication confidence tips',
        'Practice with "Toastmasters International" speaking exercises available on YouTube',
        'Watch "Public Speaking Tips" by Communication Coach Alex Lyon on YouTube',
        'Study "Confidence Building Exercises" by Psych2Go on YouTube for mental preparation techniques',
        "Join local speaking clubs or practice groups to build real-world confidence",
        "Record yourself speaking and gradually increase your comfort level with self-observation",
    ),
    "fluency": (
        'Watch "How to Speak More Clearly" by Voice Coach on YouTube',
        "Follow \"Rachel's English\" YouTube channel for pronunciation and fluency exercises",
        'Practice with "English Speaking Practice" videos by English Addict with Mr Steve',
        'Use "Shadowing Technique" tutorials available on YouTube for speech rhythm improvement',
        'Watch "Tongue Twisters for Speech Clarity" videos for articulation practice',
        'Study "Breathing Techniques for Speaking" by voice coaches on YouTube',
        "Practice reading aloud daily with news articles or books to improve flow",
    ),
    "originality": (
        'Watch "Creative Thinking Techniques" by TED-Ed on YouTube',
        'Study "How to Think Outside the Box" by MindTools on YouTube',
        'Follow "Brainstorming Methods" tutorials by business coaches on YouTube',
        'Watch "Lateral Thinking" videos by Edward de Bono on YouTube',
        'Practice with "Creative Problem Solving" exercises available on educational channels',
        'Study "Design Thinking Process" by IDEO on YouTube for structured creativity',
        "Read diverse sources and practice connecting ideas from different fields",
    ),
    "teamwork": (
        'Watch "How to Be a Better Team Player" by Harvard Business Review on YouTube',
        'Study "Active Listening Skills" by Communication Coach on YouTube',
        'Follow "Collaboration Techniques" by business leadership channels on YouTube',
        'Watch "How to Facilitate Group Discussions" by facilitation experts on YouTube',
        'Study "Conflict Resolution in Teams" by professional development channels',
        "Practice \"Building on Others' Ideas\" techniques shown in teamwork videos",
        "Join group activities or volunteer work to practice collaborative skills",
    ),
    "reasoning": (
        'Watch "Critical Thinking Skills" by TED-Ed on YouTube',
        'Study "Logical Fallacies" by Crash Course Philosophy on YouTube',
        'Follow "Argument Structure" tutorials by academic writing channels on YouTube',
        'Watch "How to Build Strong Arguments" by debate coaches on YouTube',
        'Study "Evidence-Based Reasoning" by research methodology channels',
        'Practice with "Logical Reasoning Exercises" available on educational YouTube channels',
        "Read philosophy and logic books to strengthen reasoning foundations",
    ),
    "emotional_engagement": (
        'Watch "How to Show Genuine Interest" by communication experts on YouTube',
        'Study "Emotional Intelligence in Communication" by psychology channels on YouTube',
        'Follow "Body Language for Engagement" tutorials by communication coaches',
        'Watch "How to Express Emotions Appropriately" by emotional intelligence experts',
        'Practice "Active Listening with Empathy" techniques shown in counseling videos',
        'Study "Non-verbal Communication" by body language experts on YouTube',
        "Practice mindfulness and emotional awareness exercises",
    ),
    "filler_words": (
        'Watch "How to Stop Using Filler Words" by public speaking coaches on YouTube',
        'Study "Pause Instead of Fillers" techniques by communication experts on YouTube',
        'Follow "Speech Clarity Exercises" by voice coaches on YouTube',
        'Practice with "Speaking Without Um and Uh" tutorials on YouTube',
        'Watch "Breathing Techniques for Smooth Speech" by speech therapists on YouTube',
        'Use "Slow Down Your Speech" exercises available on communication channels',
        "Record yourself and identify specific filler words to eliminate",
    ),
    "participation": (
        'Watch "How to Participate More in Group Discussions" by communication coaches on YouTube',
        'Study "Speaking Up in Meetings" techniques by business communication experts',
        'Follow "Overcoming Shyness in Groups" by psychology channels on YouTube',
        'Watch "How to Make Your Voice Heard" by leadership development channels',
        'Practice with "Group Discussion Strategies" tutorials on educational YouTube channels',
        'Study "Assertive Communication" by communication skills experts on YouTube',
        "Start with small contributions and gradually increase participation frequency",
    ),
})

# ----------------------------------------------------------------------------
# Per-message coaching tips
# ----------------------------------------------------------------------------
TIP_ELABORATE = "Try to elaborate more on your points for better clarity"
TIP_FILLERS = "Reduce filler words to improve fluency"
TIP_REASONING = "Support your points with reasoning or evidence"
TIP_TONE = "Use appropriate tone and avoid all caps"

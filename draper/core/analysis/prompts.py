"""
Prompt text for the analysis calls.

The prompts are here, not in config, because they define what the
report contains. Each one embeds the JSON shape the model must return;
nothing downstream validates that shape.
"""

COMBINED_SCHEMA = """{
  "meta": { "product_name": "string", "brand_name": "string", "industry_vertical": "string", "ad_type": "string", "quality_score": (1-10), "hero_insight": "string" },
  "content_xray": { "ethnicity": "string", "script": "string", "audio_desc": "string", "text_overlay": "string", "language": "string" },
  "production_analysis": { "camera_gear": "string", "color_grade": "string", "editing_pace": "string" },
  "creative_intelligence": { "creator_persona": "string", "visual_style": "string", "color_palette": ["#Hex1", "#Hex2", "#Hex3", "#Hex4"], "visual_density": "Minimalist / Balanced / Cluttered" },
  "communication_profile": { "voiceover_tone": "string", "cta_type": "string", "cta_text": "string", "psychological_triggers": ["Trigger 1", "Trigger 2"] },
  "strategy": { "one_liner": "string", "hook_tactic": "string", "winning_factor": "string" },
  "critique": { "missed_opportunities": ["Opp 1", "Opp 2", "Opp 3", "Opp 4"] },
  "brand_takeaways": ["Win 1", "Win 2", "Win 3", "Win 4", "Win 5", "Win 6"],
  "scene_by_scene": [ { "timecode": "0:00", "segment": "Hook", "visual": "string", "audio": "string" } ]
}"""

VISUALS_SCHEMA = """{
  "production_analysis": { "camera_gear": "string", "color_grade": "string", "editing_pace": "string" },
  "creative_intelligence": { "creator_persona": "string", "visual_style": "string", "color_palette": ["#Hex"], "visual_density": "string" },
  "content_xray_visuals": { "ethnicity": "string", "text_overlay": "string (visual description only)" },
  "scene_by_scene": [ { "timecode": "0:00", "segment": "Hook/Middle/End", "visual": "string" } ]
}"""

AUDIO_SCHEMA = """{
  "meta": { "product_name": "string", "brand_name": "string", "ad_type": "string", "quality_score": (1-10), "hero_insight": "string" },
  "content_xray_audio": { "language": "string", "script": "string", "audio_desc": "string" },
  "communication_profile": { "voiceover_tone": "string", "cta_type": "string", "cta_text": "string", "psychological_triggers": ["Trigger"] },
  "strategy": { "one_liner": "string", "hook_tactic": "string", "winning_factor": "string" },
  "critique": { "missed_opportunities": ["Point 1", "Point 2", "Point 3"] },
  "brand_takeaways": ["Win 1", "Win 2", "Win 3", "Win 4"]
}"""


def combined_system_prompt(transcript: str) -> str:
    return f"""You are "Draper," a legendary Creative Director.
Analyze this video ad based on the Visuals and Transcript ("{transcript}").

*** CRITICAL OVERRIDES ***

1. LANGUAGE DETECTION:
   - The transcript is: "{transcript}"
   - If the text looks/sounds like a Dravidian language (Kannada, Tamil, Telugu, Malayalam), label it ACCURATELY.
   - Do NOT default to Hindi. If unsure, say "South Indian Regional".

2. CAMERA GEAR:
   - Vertical (9:16) = "Smartphone (UGC)" (Always).

3. PLAYBOOK VOLUME:
   - "brand_takeaways": 6-8 distinct bullet points.
   - "missed_opportunities": 4-6 distinct bullet points.

MANDATORY SECTIONS:
1. CONTENT X-RAY: Ethnicity, Script, Text (Color/Style), Language, Audio.
2. PRODUCTION SIGNALS: Camera Gear, Color Grade, Editing Pace.
3. STRATEGY: Hook, Win, One-Liner.
4. PLAYBOOK: Detailed lists.
5. TIMELINE: 6-8 key moments.

Return VALID JSON:
{COMBINED_SCHEMA}"""


VISUALS_SYSTEM_PROMPT = f"""You are a Visual Analysis Engine.
Analyze these video frames for Technical and Production signals ONLY.

*** RULES ***
1. GEAR: Vertical (9:16) = "Smartphone (UGC)". Horizontal/Cinema = "Pro".
2. COLOR: Describe the grade (e.g., "Vibrant", "Muted", "B&W").
3. SCENES: Break down the visual narrative.

Return JSON:
{VISUALS_SCHEMA}"""


def audio_system_prompt(transcript: str) -> str:
    return f"""Analyze this ad script for Strategy & Language.
Script: "{transcript}"

*** SPEED RULES ***
1. BE CONCISE. Do not write paragraphs. Use punchy bullet points.
2. LANGUAGE: Detect Dravidian languages (Kannada, Tamil, Telugu) if present.
3. PLAYBOOK: Generate 4-5 high-impact points per section.

Return JSON:
{AUDIO_SCHEMA}"""


def timestamps_message(timestamps: list[str]) -> str:
    return f"Timestamps: {', '.join(timestamps)}. Map strictly."

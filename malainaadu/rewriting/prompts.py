"""Prompt templates for the rewrite model."""

from typing import Iterable

REWRITE_PROMPT = """நீங்கள் ஒரு தொழில்முறை மலேசிய தமிழ் செய்தி ஆசிரியர். இந்த செய்தியை மலேசிய தமிழில் மறுபடி எழுதுங்கள்.

ORIGINAL TITLE: {title}

ORIGINAL CONTENT: {description}

INSTRUCTIONS:
1. Write an engaging, SEO-friendly title in Malaysian Tamil (maximum 80 characters)
2. Rewrite the content in 200-300 words in professional, neutral Malaysian Tamil. IMPORTANT: Split content into 3-4 paragraphs using \\n\\n between paragraphs.
3. Create a brief excerpt/summary in 1-2 sentences (maximum 160 characters) in Tamil
4. Choose the most appropriate category from this list: {categories}

IMPORTANT:
- Write in third-person neutral perspective. Focus on facts.
- Use Malaysian Tamil (மலேசிய தமிழ்) - use local Malaysian terms where appropriate
- Do NOT use Indian Tamil spellings/terms - adapt to Malaysian context
- Keep proper nouns (names, places) as they are

Reply in JSON format only:
{{
  "title": "தமிழ் தலைப்பு இங்கே",
  "content": "முதல் பத்தி...\\n\\nஇரண்டாவது பத்தி...\\n\\nமூன்றாவது பத்தி...",
  "excerpt": "சுருக்கமான தமிழ் சுருக்கம்...",
  "category": "category_slug"
}}"""

REPROCESS_PROMPT = """Anda adalah editor berita profesional Malaysia. Tulis semula artikel berita ini dalam Bahasa Malaysia yang neutral dan profesional.

TAJUK: {title}

KANDUNGAN ASAL: {content}

ARAHAN:
1. Tulis semula kandungan dalam 200-300 perkataan dalam Bahasa Malaysia yang neutral, profesional, dan orang ketiga.
2. PENTING: Pisahkan kandungan kepada 3-4 perenggan yang jelas. Gunakan \\n\\n untuk memisahkan setiap perenggan.
3. Buat ringkasan/excerpt dalam 1-2 ayat (maksimum 160 aksara)

PENTING: Tulis dalam perspektif orang ketiga yang neutral. Jangan gunakan "kami" atau "saya". Fokus pada fakta.

Balas dalam format JSON sahaja:
{{
  "content": "Perenggan pertama...\\n\\nPerenggan kedua...\\n\\nPerenggan ketiga...",
  "excerpt": "Ringkasan pendek..."
}}"""


def build_rewrite_prompt(title: str, description: str, category_slugs: Iterable[str]) -> str:
    """Prompt asking for a rewritten title, body, excerpt and category."""
    return REWRITE_PROMPT.format(
        title=title,
        description=description,
        categories=", ".join(category_slugs),
    )


def build_reprocess_prompt(title: str, content: str) -> str:
    """Prompt asking for a paragraphed body and excerpt only."""
    return REPROCESS_PROMPT.format(title=title, content=content)

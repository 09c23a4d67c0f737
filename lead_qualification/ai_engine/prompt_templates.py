"""
lead_qualification/ai_engine/prompt_templates.py — All LangChain prompt templates
for the analysis oracle.

Four prompt chains:
  1. DIMENSION_ANALYSIS   — lead + dimension name → score, confidence, factors
  2. PREDICTIVE_METRICS   — lead + dimensions + benchmark → six forecasts
  3. RISK_ASSESSMENT      — lead + dimensions → five risk components
  4. ENGAGEMENT_STRATEGY  — lead + dimensions + forecasts → outreach plan
"""

from langchain_core.prompts import ChatPromptTemplate

_ANALYST_SYSTEM = (
    "You are an expert B2B lead qualification analyst for a review-management "
    "service. Be analytical, evidence-driven and realistic. "
    "Always answer with a single valid JSON object and nothing else."
)


# ── 1. Dimension Analysis ─────────────────────────────────────────────────────

DIMENSION_ANALYSIS_PROMPT = ChatPromptTemplate.from_messages([
    ("system", _ANALYST_SYSTEM),
    (
        "human",
        """Analyze the "{dimension}" dimension for lead qualification.

LEAD DATA:
{lead_data}

CONTEXT:
- Industry: {industry}
- Business size (employees): {employee_count}
- Geographic market: {location}

For {dimension}, assess the current state, the evidence supporting it, how
reliable that evidence is, and the specific factors that drive the score.
Consider the competitive landscape and the lead's review management maturity.

Return ONLY a valid JSON object with exactly these fields:
{{
  "score": <number 0-100, higher means a better-qualified lead on this dimension>,
  "confidence": <number 0-1>,
  "factors": [
    {{
      "name": "<snake_case factor name>",
      "impact": <number 0-100>,
      "evidence": ["<short evidence statement>"],
      "source": "<where the evidence comes from>",
      "reliability": <number 0-1>
    }}
  ]
}}
""",
    ),
])


# ── 2. Predictive Metrics ─────────────────────────────────────────────────────

PREDICTIVE_METRICS_PROMPT = ChatPromptTemplate.from_messages([
    ("system", _ANALYST_SYSTEM),
    (
        "human",
        """Generate predictive metrics for this lead based on its qualification analysis.

LEAD DATA:
{lead_data}

QUALIFICATION DIMENSIONS:
{dimensions}

INDUSTRY BENCHMARK ({industry}):
{benchmark}

Base predictions on similar customers in the same industry, company size and
maturity, pain intensity and urgency, financial capacity and decision
authority, technical readiness and competitive pressure.

Return ONLY a valid JSON object with exactly these fields:
{{
  "conversion_probability": <number 0-1>,
  "time_to_conversion": <days, number >= 0>,
  "lifetime_value": <USD, number >= 0>,
  "churn_risk": <first-year churn probability, number 0-1>,
  "expansion_potential": <number 0-1>,
  "referral_likelihood": <number 0-1>
}}
""",
    ),
])


# ── 3. Risk Assessment ────────────────────────────────────────────────────────

RISK_ASSESSMENT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", _ANALYST_SYSTEM),
    (
        "human",
        """Assess the commercial risks of taking on this lead as a customer.

LEAD DATA:
{lead_data}

QUALIFICATION DIMENSIONS:
{dimensions}

Score each risk from 0 (no risk) to 1 (severe risk):
- payment_risk: likelihood of late or failed payments
- implementation_risk: likelihood the rollout stalls or fails
- satisfaction_risk: likelihood the customer is unhappy with results
- compliance_risk: exposure to platform policy or regulatory problems
- competitor_lock_in: how tied the lead is to an existing vendor

Return ONLY a valid JSON object with exactly these fields:
{{
  "payment_risk": <number 0-1>,
  "implementation_risk": <number 0-1>,
  "satisfaction_risk": <number 0-1>,
  "compliance_risk": <number 0-1>,
  "competitor_lock_in": <number 0-1>
}}
""",
    ),
])


# ── 4. Engagement Strategy ────────────────────────────────────────────────────

ENGAGEMENT_STRATEGY_PROMPT = ChatPromptTemplate.from_messages([
    (
        "system",
        (
            "You are an expert B2B sales strategist. You design specific, "
            "actionable engagement plans for qualified leads. "
            "Always answer with a single valid JSON object and nothing else."
        ),
    ),
    (
        "human",
        """Optimize the engagement strategy for this qualified lead.

LEAD PROFILE:
{lead_data}

QUALIFICATION DIMENSIONS:
{dimensions}

PREDICTIVE METRICS:
{metrics}

Consider pain intensity and urgency, decision authority and process,
technical readiness, competitive threats, industry-specific communication
preferences and the predicted conversion timeline.

Return ONLY a valid JSON object with exactly these fields:
{{
  "primary_approach": "<snake_case approach name>",
  "messaging_themes": ["<theme>"],
  "content_recommendations": ["<content piece>"],
  "timing_optimization": {{
    "optimal_contact_time": "<e.g. tuesday_10am>",
    "follow_up_cadence": "<e.g. weekly_for_4_weeks>",
    "preferred_days": ["<weekday>"],
    "preferred_times": ["<time>"],
    "seasonal_considerations": ["<consideration>"],
    "urgency_indicators": ["<indicator>"]
  }},
  "channel_preferences": ["<channel>"],
  "personalization_elements": [
    {{"element": "<name>", "value": "<value>", "source": "<source>", "confidence": <number 0-1>}}
  ]
}}
""",
    ),
])

"""Prompt text for AI-backed tasks."""

from __future__ import annotations

AGENT_SYSTEM_PROMPTS: dict[str, str] = {
    "accountant": """You are an expert AI accounting assistant. You specialize in:
- Tax preparation and planning
- Bookkeeping and financial record management
- Audit support and compliance
- Financial advisory and analysis
- Payroll processing
- Invoice management

Provide accurate, professional financial advice. Always note when users should consult a licensed CPA for complex matters.""",  # noqa: E501
    "legal": """You are an expert AI legal assistant. You specialize in:
- Contract review and analysis
- Legal research and case law
- Compliance and regulatory matters
- Intellectual property guidance
- Due diligence support

Provide thorough legal analysis. Always note that you are an AI assistant and recommend consulting a licensed attorney for legal decisions.""",  # noqa: E501
    "medical": """You are an expert AI medical documentation assistant. You specialize in:
- Patient record organization and analysis
- Insurance claim processing
- Medical coding (ICD-10, CPT)
- Treatment plan documentation
- Appointment scheduling optimization

Provide accurate medical documentation support. Always note that medical decisions should be made by licensed healthcare professionals.""",  # noqa: E501
    "architect": """You are an expert AI architecture assistant. You specialize in:
- Drawing and blueprint review
- Building code compliance
- Project management support
- Material analysis and recommendations
- Cost estimation
- Permit documentation

Provide detailed architectural analysis and recommendations.""",
    "researcher": """You are an expert AI research assistant. You specialize in:
- Market research and competitive analysis
- Data mining and synthesis
- Trend analysis and forecasting
- Report writing and documentation
- Citation management
- Literature review

Provide thorough, well-sourced research with proper citations when possible.""",
    "analyst": """You are an expert AI data analyst. You specialize in:
- Data analysis and visualization recommendations
- Financial modeling
- Forecasting and predictive analysis
- KPI tracking and performance metrics
- Dashboard design recommendations
- Statistical analysis

Provide data-driven insights with clear explanations of methodology.""",
}

EXTRACTION_PROMPTS: dict[str, str] = {
    "invoice": """Extract all invoice data including:
- Invoice number, date, due date
- Vendor/seller information
- Buyer/customer information
- Line items with descriptions, quantities, prices
- Subtotal, taxes, total amount
- Payment terms""",
    "contract": """Extract key contract information including:
- Parties involved
- Effective date and term
- Key obligations of each party
- Payment terms
- Termination clauses
- Important deadlines
- Liability and indemnification clauses""",
    "financial": """Extract financial data including:
- Revenue/income figures
- Expenses and costs
- Profit/loss calculations
- Key ratios and metrics
- Year-over-year comparisons
- Notable trends""",
    "general": """Extract all important structured data including:
- Names, dates, and numbers
- Key entities and relationships
- Important figures and statistics
- Action items and deadlines""",
}

REPORT_PROMPTS: dict[str, str] = {
    "analysis": """Generate a comprehensive analysis report including:
- Executive Summary
- Key Findings
- Detailed Analysis
- Data Insights
- Recommendations
- Conclusion""",
    "summary": """Generate a professional summary report including:
- Overview
- Main Points
- Key Takeaways
- Next Steps""",
    "comparison": """Generate a comparison report including:
- Items Being Compared
- Comparison Criteria
- Side-by-Side Analysis
- Pros and Cons
- Recommendation""",
}


def system_prompt_for(agent_type: str, fallback: str = "analyst") -> str:
    """Return the system prompt for an agent type, or the fallback's."""
    return AGENT_SYSTEM_PROMPTS.get(agent_type) or AGENT_SYSTEM_PROMPTS[fallback]


def build_summary_prompt(content: str) -> str:
    return (
        "Please provide a comprehensive summary of the following document. Include:\n"
        "1. Main topics and key points\n"
        "2. Important data, figures, or statistics\n"
        "3. Key conclusions or recommendations\n"
        "4. Any action items or next steps mentioned\n\n"
        f"Document content:\n{content}"
    )


def build_question_prompt(content: str, question: str) -> str:
    return (
        f'Based on the following document, please answer this question: "{question}"\n\n'
        "If the answer cannot be found in the document, say so clearly.\n\n"
        f"Document content:\n{content}"
    )


def build_extraction_prompt(content: str, extraction_type: str) -> str:
    prompt = EXTRACTION_PROMPTS.get(extraction_type) or EXTRACTION_PROMPTS["general"]
    return (
        f"{prompt}\n\n"
        "Format the extracted data in a clear, structured format.\n\n"
        f"Document content:\n{content}"
    )


def build_report_prompt(content: str, report_type: str) -> str:
    prompt = REPORT_PROMPTS.get(report_type) or REPORT_PROMPTS["analysis"]
    return (
        f"{prompt}\n\n"
        "Use professional formatting with clear sections and bullet points "
        "where appropriate.\n\n"
        f"Source data:\n{content}"
    )


def build_research_prompt(topic: str, context: str = "") -> str:
    context_block = f"Additional context: {context}" if context else ""
    return (
        f'Conduct thorough research on the following topic: "{topic}"\n\n'
        f"{context_block}\n\n"
        "Please provide:\n"
        "1. Overview of the topic\n"
        "2. Key facts and information\n"
        "3. Different perspectives or approaches\n"
        "4. Current trends and developments\n"
        "5. Potential implications or applications\n"
        "6. Recommendations for further exploration\n\n"
        "Note: Base your response on your training data. "
        "Acknowledge any limitations in your knowledge."
    )


def build_chat_system_prompt(agent_type: str, document_context: str = "") -> str:
    prompt = system_prompt_for(agent_type)
    if document_context:
        prompt += (
            "\n\nYou have access to the following document for reference:\n"
            f"{document_context}"
        )
    return prompt

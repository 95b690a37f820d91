"""
Predefined question and answer catalog for Thoughtful AI's agents.
"""

from support_agent.agents.models import PredefinedQA


PREDEFINED_RESPONSES = [
    PredefinedQA(
        question="What does the eligibility verification agent (EVA) do?",
        answer=(
            "EVA automates the process of verifying a patient's eligibility and benefits "
            "information in real-time, eliminating manual data entry errors and reducing "
            "claim rejections."
        ),
    ),
    PredefinedQA(
        question="What does the claims processing agent (CAM) do?",
        answer=(
            "CAM streamlines the submission and management of claims, improving accuracy, "
            "reducing manual intervention, and accelerating reimbursements."
        ),
    ),
    PredefinedQA(
        question="How does the payment posting agent (PHIL) work?",
        answer=(
            "PHIL automates the posting of payments to patient accounts, ensuring fast, "
            "accurate reconciliation of payments and reducing administrative burden."
        ),
    ),
    PredefinedQA(
        question="Tell me about Thoughtful AI's Agents.",
        answer=(
            "Thoughtful AI provides a suite of AI-powered automation agents designed to "
            "streamline healthcare processes. These include Eligibility Verification (EVA), "
            "Claims Processing (CAM), and Payment Posting (PHIL), among others."
        ),
    ),
    PredefinedQA(
        question="What are the benefits of using Thoughtful AI's agents?",
        answer=(
            "Using Thoughtful AI's Agents can significantly reduce administrative costs, "
            "improve operational efficiency, and reduce errors in critical processes like "
            "claims management and payment posting."
        ),
    ),
]

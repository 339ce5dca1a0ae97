"""
JobBridge - beneficiary registration and skill-based job matching for NGOs.

Registers beneficiaries (people seeking work), providers (employers) and
their job openings, and ranks which beneficiary/job pairs are compatible
based on declared skills.
"""

__version__ = "0.1.0"

"""
Proposal Studio.

Export of RFP proposals to paginated PDF and editable DOCX documents.
"""

"""Mail Studio - MJML email document model and compiler service"""

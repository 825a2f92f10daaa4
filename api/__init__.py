# API FastAPI (hors Streamlit)

# content/evaluation_text.py

intro_paragraph = """
Periodic evaluation of the deployed model. Use the slider to restrict the 
view to a range of time periods; the embedding, class distribution and the 
list of uncertain samples follow the selection.
"""

uncertain_paragraph = """
The fifty samples the model was least confident about in the selected range. 
Select a row, choose the correct family and submit to relabel it. Pending 
choices are cleared when the time range changes.
"""

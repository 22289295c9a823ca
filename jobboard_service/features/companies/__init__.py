"""Companies feature: public company profiles and recruiter memberships."""

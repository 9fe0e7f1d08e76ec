import asyncio

import altair as alt
import streamlit as st

from nutrisnap_core.config import Settings, configure_logging, load_settings
from nutrisnap_core.errors import GatewayError, SchemaViolation
from nutrisnap_core.export import DIET_PLAN_COLUMNS, diet_plan_dataframe, export_diet_plan_pdf
from nutrisnap_core.flows import with_nutrisnap
from nutrisnap_core.schemas import GenerateDietPlanInput
from nutrisnap_core.utils import compute_totals, file_to_data_uri, recommended_protein_g
from nutrisnap_core.validation import validate_input

ACTIVITY_LEVELS = {
    "Sedentary": "sedentary",
    "Lightly active": "lightlyActive",
    "Moderately active": "moderatelyActive",
    "Very active": "veryActive",
    "Extra active": "extraActive",
}
HEALTH_GOALS = {
    "Weight loss": "weightLoss",
    "Weight gain": "weightGain",
    "Muscle building": "muscleBuilding",
    "Overall health": "overallHealth",
}


@st.cache_resource
def get_settings() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


st.set_page_config(page_title="NutriSnap", page_icon="🥗", layout="wide")

st.title("🥗 NutriSnap")

if "food" not in st.session_state:
    st.session_state.food = None
if "plan" not in st.session_state:
    st.session_state.plan = None
if "plan_weight" not in st.session_state:
    st.session_state.plan_weight = None

# --- Food analysis ---
st.subheader("Analyze a food")
source = st.radio("Image source", ["Upload", "Camera"], horizontal=True)
if source == "Upload":
    photo = st.file_uploader("Upload Image", type=["png", "jpg", "jpeg", "webp"])
else:
    photo = st.camera_input("Take a photo")
description = st.text_input("Food Description", placeholder="e.g., apple, chicken breast")

if photo is not None:
    st.image(photo, width=300)

col1, col2 = st.columns([1, 1])
with col1:
    analyze_image = st.button("Analyze Image")
with col2:
    analyze_text = st.button("Analyze Description")

if analyze_image and photo is None:
    st.error("Please upload an image.")
elif analyze_text and not description.strip():
    st.error("Please enter a description of the food.")
elif analyze_image or analyze_text:
    payload = {"photoDataUri": "", "description": description.strip()}
    if analyze_image:
        payload["photoDataUri"] = file_to_data_uri(photo.getvalue(), photo.type or "image/jpeg")
    with st.spinner("Analyzing..."):
        try:
            st.session_state.food = asyncio.run(
                with_nutrisnap(get_settings(), lambda snap: snap.analyze_food_image(payload))
            )
        except GatewayError as e:
            st.session_state.food = None
            st.error(f"Failed to analyze food. Please try again. ({e})")

if st.session_state.food:
    item = st.session_state.food.food_item
    st.markdown(f"### {item.name}")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Calories", f"{item.nutrition.calories:g} kcal")
    c2.metric("Protein", f"{item.nutrition.protein:g} g")
    c3.metric("Carbs", f"{item.nutrition.carbs:g} g")
    c4.metric("Fat", f"{item.nutrition.fat:g} g")

# --- Diet plan ---
st.markdown("---")
st.subheader("Diet plan")

with st.form("diet_plan"):
    f1, f2, f3, f4 = st.columns(4)
    age = f1.number_input("Age", min_value=0, max_value=120, value=30, step=1)
    gender = f2.selectbox("Gender", ["male", "female"])
    height = f3.number_input("Height (cm)", min_value=0.0, value=170.0)
    weight = f4.number_input("Weight (kg)", min_value=0.0, value=70.0)
    g1, g2, g3 = st.columns(3)
    activity = g1.selectbox("Activity level", list(ACTIVITY_LEVELS))
    goal = g2.selectbox("Health goal", list(HEALTH_GOALS))
    target = g3.number_input("Target calories (0 = let the plan decide)", min_value=0, value=0, step=50)
    food_choices = st.text_input("Food choices (vegetarian, vegan, ...)")
    foods_to_avoid = st.text_input("Foods to avoid")
    favorite_foods = st.text_input("Favorite foods")
    meal_preferences = st.text_input("Meal preferences (meals per day, portion sizes)")
    snacking_habits = st.text_input("Snacking habits")
    dietary_restrictions = st.text_input("Dietary restrictions")
    submitted = st.form_submit_button("Generate Plan")

if submitted:
    payload = {
        "age": int(age),
        "gender": gender,
        "height": height,
        "weight": weight,
        "activityLevel": ACTIVITY_LEVELS[activity],
        "healthGoal": HEALTH_GOALS[goal],
    }
    optional = {
        "foodChoices": food_choices,
        "foodsToAvoid": foods_to_avoid,
        "favoriteFoods": favorite_foods,
        "mealPreferences": meal_preferences,
        "snackingHabits": snacking_habits,
        "dietaryRestrictions": dietary_restrictions,
    }
    payload.update({k: v.strip() for k, v in optional.items() if v.strip()})
    if target:
        payload["targetCaloricIntake"] = target

    try:
        request = validate_input(GenerateDietPlanInput, payload)
    except SchemaViolation as e:
        request = None
        st.error(f"Please check the form: {e.path} ({e.expected}).")

    if request is not None:
        with st.spinner("Generating plan..."):
            try:
                st.session_state.plan = asyncio.run(
                    with_nutrisnap(get_settings(), lambda snap: snap.generate_diet_plan(request))
                )
                st.session_state.plan_weight = request.weight
            except GatewayError as e:
                st.session_state.plan = None
                st.error(f"Failed to generate diet plan. Please try again. ({e})")

if st.session_state.plan:
    plan = st.session_state.plan
    df = diet_plan_dataframe(plan)

    # --- Totals as cards ---
    totals = compute_totals(df)
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Calories", f"{int(totals['calories'])} kcal")
    c2.metric("Protein", f"{totals['protein']} g")
    c3.metric("Carbs", f"{totals['carbs']} g")
    c4.metric("Fat", f"{totals['fat']} g")
    c5.metric("Recommended protein", f"{recommended_protein_g(st.session_state.plan_weight)} g")

    # --- Table view ---
    st.dataframe(df.set_axis(DIET_PLAN_COLUMNS, axis=1), hide_index=True)

    macros = df.melt(id_vars=["meal_time"], value_vars=["protein", "carbs", "fat"], var_name="macro", value_name="grams")
    bar = alt.Chart(macros).mark_bar().encode(
        x=alt.X('meal_time:N', title='Meal', sort=None),
        y=alt.Y('grams:Q', title='Grams'),
        color=alt.Color('macro:N', title='Macro'),
        tooltip=[alt.Tooltip('meal_time:N'), alt.Tooltip('macro:N'), alt.Tooltip('grams:Q')]
    ).properties(height=300)
    st.altair_chart(bar, use_container_width=True)

    st.download_button(
        "Download PDF",
        data=export_diet_plan_pdf(plan),
        file_name="nutrisnap-diet-plan.pdf",
        mime="application/pdf",
    )

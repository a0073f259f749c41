import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pymongo.collection import Collection
from starlette.middleware.base import BaseHTTPMiddleware

import config
from auth import (
    clear_token_cookie,
    create_access_token,
    policy_guard,
    require_owner,
    set_token_cookie,
    verify_token,
)
from database import (
    MongoDatabase,
    delete_ack,
    get_food_collection,
    get_request_collection,
    insert_ack,
    parse_object_id,
    serialize_doc,
    update_ack,
)
from queries import build_food_query
from schemas import FoodListing, PickupRequest, RequestStatusUpdate, TokenClaims

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("eats_exchange.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    mongo = MongoDatabase(config.DATABASE_URL, config.DATABASE_NAME)
    mongo.connect()
    app.state.mongo = mongo
    logger.info("Eats Exchange Server is running on port %s", config.PORT)
    try:
        yield
    finally:
        mongo.close()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.4fs)",
            request.method,
            request.url.path,
            response.status_code,
            time.time() - start_time,
        )
        return response


app = FastAPI(title="Eats Exchange API", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Eats Exchange Server is running"


# Auth routes
@app.post("/jwt")
def issue_token(claims: TokenClaims, response: Response):
    logger.info("Issuing token for %s", claims.email)
    token = create_access_token(claims.model_dump())
    set_token_cookie(response, token)
    return {"success": True}


@app.get("/logout")
def logout(response: Response):
    clear_token_cookie(response)
    return {"success": True}


# Food listing endpoints
@app.get("/foods")
def list_foods(
    sortByDate: Optional[str] = None,
    sortByQuantity: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    email: Optional[str] = None,
    foods: Collection = Depends(get_food_collection),
):
    query = build_food_query(
        search=search,
        email=email,
        sort_by_date=sortByDate,
        sort_by_quantity=sortByQuantity,
        limit=limit,
    )
    return [serialize_doc(d) for d in query.run(foods)]


@app.get("/foods/{food_id}")
def get_food(food_id: str, foods: Collection = Depends(get_food_collection)):
    return serialize_doc(foods.find_one({"_id": parse_object_id(food_id)}))


@app.post("/foods", dependencies=[Depends(verify_token)])
def create_food(food: FoodListing, foods: Collection = Depends(get_food_collection)):
    logger.info("Creating listing %s for %s", food.FoodName, food.Donator.Email)
    result = foods.insert_one(food.model_dump())
    return insert_ack(result)


@app.put("/foods/{food_id}", dependencies=[Depends(policy_guard(lambda: config.GUARD_FOOD_UPDATES))])
def replace_food(food_id: str, food: FoodListing, foods: Collection = Depends(get_food_collection)):
    logger.info("Updating listing %s", food_id)
    result = foods.update_one(
        {"_id": parse_object_id(food_id)},
        {"$set": food.update_fields()},
        upsert=True,
    )
    return update_ack(result)


@app.delete("/foods/{food_id}", dependencies=[Depends(verify_token)])
def delete_food(food_id: str, foods: Collection = Depends(get_food_collection)):
    result = foods.delete_one({"_id": parse_object_id(food_id)})
    return delete_ack(result)


# Pickup request endpoints
@app.post("/requests", dependencies=[Depends(verify_token)])
def create_request(pickup: PickupRequest, requests: Collection = Depends(get_request_collection)):
    logger.info("Creating request on %s by %s", pickup.FoodId, pickup.Requester.Email)
    result = requests.insert_one(pickup.model_dump())
    return insert_ack(result)


@app.get("/requests")
def list_my_requests(
    email: Optional[str] = Query(None),
    user=Depends(verify_token),
    requests: Collection = Depends(get_request_collection),
):
    require_owner(user, email)
    return [serialize_doc(d) for d in requests.find({"Requester.Email": email})]


@app.get("/requests/{food_id}", dependencies=[Depends(verify_token)])
def list_food_requests(food_id: str, requests: Collection = Depends(get_request_collection)):
    return [serialize_doc(d) for d in requests.find({"FoodId": food_id})]


@app.patch("/requests/{request_id}", dependencies=[Depends(verify_token)])
def update_request_status(
    request_id: str,
    data: RequestStatusUpdate,
    requests: Collection = Depends(get_request_collection),
):
    logger.info("Setting request %s to %s", request_id, data.Status)
    result = requests.update_one(
        {"_id": parse_object_id(request_id)},
        {"$set": {"Status": data.Status}},
    )
    return update_ack(result)


@app.delete("/requests/{request_id}", dependencies=[Depends(verify_token)])
def delete_request(request_id: str, requests: Collection = Depends(get_request_collection)):
    result = requests.delete_one({"_id": parse_object_id(request_id)})
    return delete_ack(result)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)

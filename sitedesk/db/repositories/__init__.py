from sitedesk.db.repositories.applications import ApplicationsRepository
from sitedesk.db.repositories.campaigns import CampaignsRepository, DeletedCampaign
from sitedesk.db.repositories.posts import PostsRepository
from sitedesk.db.repositories.users import UsersRepository
